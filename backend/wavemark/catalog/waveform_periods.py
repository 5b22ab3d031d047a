"""Period waveform drawing on a fixed 0-5 ms exam-style grid.

Expected cycles are ``5 / period_ms``. Transition points for square and saw
rows are listed explicitly; they are quoted to the grader verbatim.
"""

from __future__ import annotations

from ..waveforms import WaveformShape as W
from .models import AssessmentDefinition, PeriodChallenge

ASSESSMENT_ID = "waveform-periods"
TIME_WINDOW_MS = 5.0


def build_waveform_periods() -> AssessmentDefinition:
    challenges = (
        PeriodChallenge(
            id=1,
            name="Sine (1ms period)",
            shape=W.SINE,
            period_ms=1,
            expected_cycles=5,
            description="Draw a SINE wave with 1ms period",
            hint="1ms period = 5 complete cycles in 5ms. Zero crossings every 0.5ms.",
            color_key="green",
        ),
        PeriodChallenge(
            id=2,
            name="Square (2ms period)",
            shape=W.SQUARE,
            period_ms=2,
            expected_cycles=2.5,
            transition_points=(1, 2, 3, 4),
            description="Draw a SQUARE wave with 2ms period",
            hint="2ms period = 2.5 cycles. Transitions at 1ms, 2ms, 3ms, 4ms.",
            color_key="amber",
        ),
        PeriodChallenge(
            id=3,
            name="Sine (0.5ms period)",
            shape=W.SINE,
            period_ms=0.5,
            expected_cycles=10,
            description="Draw a SINE wave with 0.5ms period",
            hint="0.5ms period = 10 cycles. High frequency - draw carefully!",
            color_key="cyan",
        ),
        PeriodChallenge(
            id=4,
            name="Triangle (1ms period)",
            shape=W.TRIANGLE,
            period_ms=1,
            expected_cycles=5,
            description="Draw a TRIANGLE wave with 1ms period",
            hint="1ms period = 5 cycles. Peaks at 0.5ms, 1.5ms, 2.5ms, 3.5ms, 4.5ms.",
            color_key="green",
        ),
        PeriodChallenge(
            id=5,
            name="Square (1ms period)",
            shape=W.SQUARE,
            period_ms=1,
            expected_cycles=5,
            transition_points=(0.5, 1, 1.5, 2, 2.5, 3, 3.5, 4, 4.5),
            description="Draw a SQUARE wave with 1ms period",
            hint="1ms period = 5 cycles. Transitions every 0.5ms.",
            color_key="amber",
            exam_style=True,
        ),
        PeriodChallenge(
            id=6,
            name="Saw (2ms period)",
            shape=W.SAW,
            period_ms=2,
            expected_cycles=2.5,
            transition_points=(2, 4),
            description="Draw a SAW wave with 2ms period",
            hint="2ms period = 2.5 cycles. Linear ramp, instant reset at 2ms and 4ms.",
            color_key="purple",
        ),
        PeriodChallenge(
            id=7,
            name="Sine (4ms period)",
            shape=W.SINE,
            period_ms=4,
            expected_cycles=1.25,
            description="Draw a SINE wave with 4ms period",
            hint="4ms period = 1.25 cycles. Slow wave - only slightly more than one cycle.",
            color_key="green",
        ),
        PeriodChallenge(
            id=8,
            name="Triangle (2ms period)",
            shape=W.TRIANGLE,
            period_ms=2,
            expected_cycles=2.5,
            description="Draw a TRIANGLE wave with 2ms period",
            hint="2ms period = 2.5 cycles. Peaks at 1ms, 3ms; troughs at 0, 2ms, 4ms.",
            color_key="cyan",
        ),
        PeriodChallenge(
            id=9,
            name="Square (0.5ms period)",
            shape=W.SQUARE,
            period_ms=0.5,
            expected_cycles=10,
            transition_points=(
                0.25, 0.5, 0.75, 1, 1.25, 1.5, 1.75, 2, 2.25, 2.5,
                2.75, 3, 3.25, 3.5, 3.75, 4, 4.25, 4.5, 4.75,
            ),
            description="Draw a SQUARE wave with 0.5ms period",
            hint="0.5ms period = 10 cycles. Rapid switching - transitions every 0.25ms.",
            color_key="red",
            exam_style=True,
        ),
        PeriodChallenge(
            id=10,
            name="Saw (1ms period)",
            shape=W.SAW,
            period_ms=1,
            expected_cycles=5,
            transition_points=(1, 2, 3, 4, 5),
            description="Draw a SAW wave with 1ms period",
            hint="1ms period = 5 cycles. Linear ramp up, instant reset at each millisecond.",
            color_key="amber",
        ),
    )
    return AssessmentDefinition(
        id=ASSESSMENT_ID,
        title="Period Waveform Drawing",
        description=(
            "Draw waveforms with specific periods. Given a period in milliseconds, draw the waveform "
            "showing the correct number of cycles in a 5ms time window."
        ),
        type="drawing",
        marking_method="ai",
        topic="2.5 Numeracy",
        estimated_time="15-20 minutes",
        time_window_ms=TIME_WINDOW_MS,
        period_challenges=challenges,
    )
