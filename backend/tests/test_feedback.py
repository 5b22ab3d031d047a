from __future__ import annotations

import pytest

from wavemark.errors import ParseError, ValidationError
from wavemark.feedback import (
    DrawingFeedback,
    binary_mark,
    coerce_mark,
    extract_json_object,
    feedback_consistency,
    parse_feedback,
    resolve_recorded_mark,
    resolve_result_mark,
)
from wavemark.images import DEFAULT_MEDIA_TYPE, normalize_image


def test_extracts_json_from_surrounding_prose():
    payload = extract_json_object('Here is the result: {"mark":1,"feedback":"ok"}')
    assert payload == {"mark": 1, "feedback": "ok"}


def test_extraction_is_greedy_across_nested_objects():
    text = 'Result:\n{"cycleCount": {"detected": 4, "expected": 4, "correct": true}, "mark": 1}\nThanks!'
    payload = extract_json_object(text)
    assert payload["cycleCount"]["correct"] is True


def test_missing_json_raises_parse_error_with_raw_text():
    with pytest.raises(ParseError) as excinfo:
        extract_json_object("I could not see a waveform in that image.")
    assert excinfo.value.raw_response == "I could not see a waveform in that image."


def test_malformed_json_raises_parse_error():
    with pytest.raises(ParseError):
        extract_json_object("{mark: 1}")


def test_binary_mark_requires_every_present_criterion():
    passing = DrawingFeedback.model_validate(
        {
            "cycleCount": {"detected": 4, "expected": 4, "correct": True},
            "shapeAccuracy": {"detected": "sine", "expected": "sine", "correct": True},
        }
    )
    assert binary_mark(passing) == 1

    failing = DrawingFeedback.model_validate(
        {
            "cycleCount": {"detected": 4, "expected": 4, "correct": True},
            "shapeAccuracy": {"detected": "sine", "expected": "sine", "correct": True},
            "transitionTiming": {"expectedPositions": [1, 2], "assessment": "significantly wrong", "correct": False},
        }
    )
    assert binary_mark(failing) == 0
    assert failing.transition_timing is not None
    assert failing.transition_timing.expected_positions == [1, 2]

    assert binary_mark(DrawingFeedback.model_validate({"feedback": "no criteria"})) == 0


def test_legacy_fields_survive_validation():
    feedback = parse_feedback({"suggestedMark": 1, "strengths": ["neat"], "overallFeedback": "Good"})
    assert feedback is not None
    assert feedback.suggested_mark == 1
    assert feedback.model_dump(by_alias=True)["strengths"] == ["neat"]


def test_mark_resolution():
    assert resolve_recorded_mark({"mark": 0, "suggestedMark": 1}) == 0
    assert resolve_recorded_mark({"suggestedMark": 1}) == 1
    assert resolve_recorded_mark({}) is None
    assert resolve_result_mark({"suggestedMark": 1}) == 0
    assert resolve_result_mark({"mark": 1}) == 1


@pytest.mark.parametrize(
    "raw, expected",
    [(True, 1), (False, 0), ("1", 1), (" 0 ", 0), ("0.5", 0.5), ("one", None), (None, None), (float("nan"), None)],
)
def test_recorded_and_returned_marks_agree(raw, expected):
    assert coerce_mark(raw) == expected
    payload = {"mark": raw}
    assert resolve_recorded_mark(payload) == expected
    assert resolve_result_mark(payload) == (0 if expected is None else expected)


def test_consistency_keeps_grader_mark(caplog):
    feedback = DrawingFeedback.model_validate(
        {"cycleCount": {"correct": False}, "shapeAccuracy": {"correct": True}, "mark": 1}
    )
    with caplog.at_level("WARNING"):
        assert feedback_consistency(feedback) is False
    assert feedback.mark == 1
    assert "keeping the grader's mark" in caplog.text


def test_normalize_data_uri():
    image = normalize_image("data:image/jpeg;base64,/9j/4AAQ")
    assert image.media_type == "image/jpeg"
    assert image.data == "/9j/4AAQ"
    assert image.as_data_url() == "data:image/jpeg;base64,/9j/4AAQ"


def test_normalize_bare_payload_defaults_to_png():
    image = normalize_image("iVBORw0KGgo=")
    assert image.media_type == DEFAULT_MEDIA_TYPE
    assert image.data == "iVBORw0KGgo="


def test_unparseable_data_prefix_passes_through():
    image = normalize_image("data:image/png,rawbytes")
    assert image.media_type == "image/png"
    assert image.data == "data:image/png,rawbytes"


def test_empty_image_rejected():
    with pytest.raises(ValidationError):
        normalize_image("")
    with pytest.raises(ValidationError):
        normalize_image(None)
