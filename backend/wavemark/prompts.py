"""Grading prompts for the vision marker.

Every drawing prompt has two variants. The single-image variant describes a
drawing with the original waveform baked in as a dashed overlay; the
reference variant describes a student image followed by a correct-answer
image. Both share the task, binary rules and JSON schema so the grader
applies the same standard either way.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .answer_key import DrawingAnswer, FilterAnswer, OctaveAnswer, PeriodAnswer
from .waveforms import WaveformShape

_SHAPE_CHARACTERISTICS = {
    WaveformShape.SINE: "- SINE: Smooth sinusoidal curve with rounded peaks and troughs",
    WaveformShape.SQUARE: "- SQUARE: Flat tops and bottoms with vertical transitions (sharp corners)",
    WaveformShape.SAW: "- SAW: Linear diagonal ramps with instant vertical resets",
    WaveformShape.TRIANGLE: "- TRIANGLE: Linear segments meeting at sharp peaks and troughs",
}

_FILTER_CHARACTERISTICS = {
    "highpass": "Flat above the cutoff, rolling off steadily towards the low frequencies below it",
    "lowpass": "Flat below the cutoff, rolling off steadily towards the high frequencies above it",
    "lowshelf": "A level change below the corner frequency that flattens out, not a full cut",
    "highshelf": "A level change above the corner frequency that flattens out, not a full cut",
    "bell": "A symmetrical bump or dip centred on the frequency, returning to 0dB either side",
    "notch": "A very narrow, deep cut centred on the frequency with the rest of the curve flat",
}

_FILTER_LABELS = {
    "highpass": "High-Pass Filter",
    "lowpass": "Low-Pass Filter",
    "lowshelf": "Low Shelf",
    "highshelf": "High Shelf",
    "bell": "Bell (parametric) filter",
    "notch": "Notch filter",
}

_ADDRESS_STUDENT = (
    'IMPORTANT: In your feedback, address the student directly using "you" '
    '(e.g. "You drew..." not "The student drew...").'
)


def format_number(value: float) -> str:
    """Render ``4.0`` as ``4`` and ``2.5`` as ``2.5``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _format_list(values: Sequence[float]) -> str:
    return ", ".join(format_number(value) for value in values)


def _format_frequency(hz: float) -> str:
    if hz >= 1000:
        return f"{format_number(hz / 1000)}kHz"
    return f"{format_number(hz)}Hz"


def _format_gain(gain: float) -> str:
    sign = "+" if gain > 0 else ""
    return f"{sign}{format_number(gain)}dB"


def _binary_rules(conditions: Sequence[str]) -> List[str]:
    lines = [
        "BINARY MARKING RULES (1 mark per question):",
        "Award 1 mark ONLY if ALL conditions are met:",
    ]
    lines.extend(f"{index}. {condition}" for index, condition in enumerate(conditions, start=1))
    lines.append("")
    lines.append("Award 0 marks if any condition is wrong.")
    return lines


def _json_schema(blocks: Sequence[str]) -> List[str]:
    body = ",\n".join(blocks)
    return [
        "Respond with JSON only:",
        "{",
        body + ",",
        '  "mark": <1 if ALL required conditions are correct, otherwise 0>,',
        '  "feedback": "<brief constructive feedback addressing the student with \'you\'>"',
        "}",
        "",
        "Return ONLY the JSON object.",
    ]


def _cycle_count_block(expected: float) -> str:
    return (
        '  "cycleCount": {\n'
        '    "detected": <number of complete cycles in the student\'s line>,\n'
        f'    "expected": {format_number(expected)},\n'
        '    "correct": <true if detected approximately matches expected>\n'
        "  }"
    )


def _shape_block(expected: str) -> str:
    return (
        '  "shapeAccuracy": {\n'
        '    "detected": "<sine/square/saw/triangle/unclear>",\n'
        f'    "expected": "{expected}",\n'
        '    "correct": <true if shape matches>\n'
        "  }"
    )


def _transition_block(points: Sequence[float]) -> str:
    return (
        '  "transitionTiming": {\n'
        f'    "expectedPositions": [{_format_list(points)}],\n'
        '    "assessment": "<accurate/slightly off/significantly wrong>",\n'
        '    "correct": <true if transitions are at approximately correct positions>\n'
        "  }"
    )


def _criterion_block(key: str, expected: str, detected_hint: str) -> str:
    return (
        f'  "{key}": {{\n'
        f'    "detected": "<{detected_hint}>",\n'
        f'    "expected": "{expected}",\n'
        '    "correct": <true if the drawing matches>\n'
        "  }"
    )


def _join(sections: Sequence[Optional[Sequence[str]]]) -> str:
    lines: List[str] = []
    for section in sections:
        if not section:
            continue
        if lines:
            lines.append("")
        lines.extend(section)
    return "\n".join(lines)


def build_octave_prompt(answer: OctaveAnswer, *, with_reference: bool) -> str:
    expected = format_number(answer.expected_cycles)
    if with_reference:
        legend = [
            "TWO IMAGES PROVIDED:",
            "1. FIRST IMAGE (Student's Drawing): Original waveform (dashed gray) + student's attempt (solid blue)",
            "2. SECOND IMAGE (Correct Answer): Original waveform (dashed gray) + correct answer (solid green)",
        ]
    else:
        legend = [
            "IMAGE:",
            f"- Dashed gray line = ORIGINAL waveform: {answer.original_shape} wave with "
            f"{answer.original_cycles} cycles",
            "- Solid blue line = THE STUDENT'S DRAWING to mark",
        ]
    operation = "multiply" if answer.direction == "higher" else "divide"
    task = [
        "TASK:",
        f"- Original: {answer.original_shape} wave with {answer.original_cycles} cycles",
        f"- Student asked to draw: {answer.target_shape} wave, {answer.octaves} octave(s) {answer.direction}",
        f"- Expected: {expected} cycles of a {answer.target_shape} wave",
    ]
    rules = _binary_rules(
        [
            f"CYCLE COUNT: The student's blue line has {expected} complete cycles (peaks and troughs)",
            f"WAVEFORM SHAPE: The student's blue line shows the correct {answer.target_shape} wave shape",
        ]
    )
    counting = [
        "Count cycles by counting complete oscillations (peak-to-trough-to-peak = 1 cycle).",
        f"For octave changes: {answer.direction} by {answer.octaves} octave(s) means {operation} "
        f"cycles by {answer.factor}.",
    ]
    characteristics = _shape_section(answer.target_shape)
    schema = _json_schema([_cycle_count_block(answer.expected_cycles), _shape_block(answer.target_shape)])
    return _join(
        [
            ["You are marking a student's waveform drawing for A-Level Music Technology."],
            legend,
            task,
            rules,
            counting,
            characteristics,
            [_ADDRESS_STUDENT],
            schema,
        ]
    )


def _shape_section(shape: str) -> Optional[List[str]]:
    try:
        resolved = WaveformShape(shape)
    except ValueError:
        return None
    return ["SHAPE CHARACTERISTICS:", _SHAPE_CHARACTERISTICS[resolved]]


def build_period_prompt(answer: PeriodAnswer, *, with_reference: bool) -> str:
    shape = answer.shape.value
    expected = format_number(answer.expected_cycles)
    window = format_number(answer.window_ms)
    period = format_number(answer.period_ms)
    if with_reference:
        legend = [
            "TWO IMAGES PROVIDED:",
            f"1. FIRST IMAGE (Student's Drawing): Time axis 0-{window}ms, student's waveform (solid blue)",
            f"2. SECOND IMAGE (Correct Answer): Time axis 0-{window}ms, correct waveform (solid green)",
        ]
    else:
        legend = [
            "IMAGE:",
            "- Blue line = THE STUDENT'S DRAWING to mark",
            f"- Time axis: 0-{window}ms (X-axis, shown at bottom)",
            "- Displacement axis (Y-axis)",
        ]
    task = [
        "TASK GIVEN TO STUDENT:",
        f"- Draw a {shape.upper()} wave with period {period}ms",
        f"- Time window: 0-{window}ms",
        f"- Expected number of cycles: {expected} (calculated: {window}ms / {period}ms)",
    ]
    transitions: Optional[List[str]] = None
    conditions = [
        f"CYCLE COUNT: The student's blue line has approximately {expected} complete cycles",
        f"WAVEFORM SHAPE: The student's blue line shows correct {shape} wave characteristics",
    ]
    blocks = [_cycle_count_block(answer.expected_cycles), _shape_block(shape)]
    if answer.has_transitions and answer.transition_points:
        movement = (
            "Square wave transitions (high<->low) should occur at these times."
            if answer.shape is WaveformShape.SQUARE
            else "Sawtooth resets (instant drops) should occur at these times."
        )
        transitions = [
            f"TRANSITION TIMING VERIFICATION (for {shape} waves):",
            f"Expected transition times: {_format_list(answer.transition_points)}ms",
            movement,
            "Check that the student's drawing shows transitions at approximately these positions.",
        ]
        conditions.append("TRANSITION TIMING: Transitions occur at approximately correct time positions")
        blocks.append(_transition_block(answer.transition_points))
    return _join(
        [
            ["You are marking a student's period waveform drawing for A-Level Music Technology."],
            legend,
            task,
            transitions,
            _binary_rules(conditions),
            _shape_section(shape),
            [_ADDRESS_STUDENT],
            _json_schema(blocks),
        ]
    )


def build_filter_prompt(answer: FilterAnswer, *, with_reference: bool) -> str:
    label = _FILTER_LABELS.get(answer.filter_type, answer.filter_type)
    frequency = _format_frequency(answer.frequency)
    if with_reference:
        legend = [
            "TWO IMAGES PROVIDED:",
            "1. FIRST IMAGE (Student's Drawing): Frequency response on a log axis (20Hz-20kHz), "
            "student's curve (solid blue)",
            "2. SECOND IMAGE (Correct Answer): Same axes, correct curve (solid green)",
        ]
    else:
        legend = [
            "IMAGE:",
            "- Blue line = THE STUDENT'S DRAWING to mark",
            "- Frequency axis: 20Hz-20kHz, logarithmic (X-axis)",
            "- Gain axis: -24dB to +24dB with 0dB marked (Y-axis)",
        ]
    target = f"{label} at {frequency}"
    if answer.has_gain:
        target = f"{label} with {_format_gain(answer.gain)} at {frequency}"
    task = ["TASK GIVEN TO STUDENT:", f"- Draw a {target}"]
    if answer.q is not None:
        task.append(f"- Q: {format_number(answer.q)}")
    conditions = [
        f"FILTER TYPE: The curve has the shape of a {label}",
        f"FREQUENCY PLACEMENT: The cutoff or centre sits at approximately {frequency}",
    ]
    blocks = [
        _criterion_block("filterType", answer.filter_type, "highpass/lowpass/lowshelf/highshelf/bell/notch/unclear"),
        _criterion_block("frequencyPlacement", frequency, "approximate frequency of the cutoff or centre"),
    ]
    if answer.has_gain:
        gain = _format_gain(answer.gain)
        conditions.append(f"GAIN: The boost or cut reaches approximately {gain}")
        blocks.append(_criterion_block("gainAccuracy", gain, "approximate gain change in dB"))
    characteristics = None
    if answer.filter_type in _FILTER_CHARACTERISTICS:
        characteristics = [
            "FILTER CHARACTERISTICS:",
            f"- {label.upper()}: {_FILTER_CHARACTERISTICS[answer.filter_type]}",
        ]
    return _join(
        [
            ["You are marking a student's EQ filter drawing for A-Level Music Technology."],
            legend,
            task,
            _binary_rules(conditions),
            characteristics,
            [_ADDRESS_STUDENT],
            _json_schema(blocks),
        ]
    )


def build_marking_prompt(answer: DrawingAnswer, *, with_reference: bool) -> str:
    if isinstance(answer, PeriodAnswer):
        return build_period_prompt(answer, with_reference=with_reference)
    if isinstance(answer, FilterAnswer):
        return build_filter_prompt(answer, with_reference=with_reference)
    return build_octave_prompt(answer, with_reference=with_reference)


__all__ = [
    "build_filter_prompt",
    "build_marking_prompt",
    "build_octave_prompt",
    "build_period_prompt",
    "format_number",
]
