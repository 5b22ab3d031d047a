"""Octave waveform drawing: redraw the reference wave shifted by whole octaves."""

from __future__ import annotations

from ..waveforms import WaveformShape as W
from .models import AssessmentDefinition, OctaveChallenge

ASSESSMENT_ID = "waveform-octaves"


def build_waveform_octaves() -> AssessmentDefinition:
    challenges = (
        OctaveChallenge(
            id=1,
            name="Sine → Sine (Octave Lower)",
            original_cycles=4,
            target_cycles=2,
            original_shape=W.SINE,
            target_shape=W.SINE,
            direction="lower",
            octaves=1,
            description="Draw a SINE wave ONE OCTAVE LOWER",
            hint="Same shape, but period doubles → half as many cycles.",
            color_key="green",
        ),
        OctaveChallenge(
            id=2,
            name="Square → Square (Octave Higher)",
            original_cycles=2,
            target_cycles=4,
            original_shape=W.SQUARE,
            target_shape=W.SQUARE,
            direction="higher",
            octaves=1,
            description="Draw a SQUARE wave ONE OCTAVE HIGHER",
            hint="Same shape, but period halves → twice as many cycles.",
            color_key="amber",
        ),
        OctaveChallenge(
            id=3,
            name="Square → Saw (Octave Lower)",
            original_cycles=4,
            target_cycles=2,
            original_shape=W.SQUARE,
            target_shape=W.SAW,
            direction="lower",
            octaves=1,
            description="Draw a SAW wave ONE OCTAVE LOWER",
            hint="2023 Exam Style! Change shape AND double the period.",
            color_key="cyan",
            exam_style=True,
        ),
        OctaveChallenge(
            id=4,
            name="Triangle → Triangle (Octave Lower)",
            original_cycles=6,
            target_cycles=3,
            original_shape=W.TRIANGLE,
            target_shape=W.TRIANGLE,
            direction="lower",
            octaves=1,
            description="Draw a TRIANGLE wave ONE OCTAVE LOWER",
            hint="Same shape. 6 cycles → 3 cycles.",
            color_key="green",
        ),
        OctaveChallenge(
            id=5,
            name="Sine → Square (Octave Higher)",
            original_cycles=3,
            target_cycles=6,
            original_shape=W.SINE,
            target_shape=W.SQUARE,
            direction="higher",
            octaves=1,
            description="Draw a SQUARE wave ONE OCTAVE HIGHER",
            hint="Change to square wave AND double the cycles.",
            color_key="amber",
            exam_style=True,
        ),
        OctaveChallenge(
            id=6,
            name="Saw → Saw (Two Octaves Lower)",
            original_cycles=8,
            target_cycles=2,
            original_shape=W.SAW,
            target_shape=W.SAW,
            direction="lower",
            octaves=2,
            description="Draw a SAW wave TWO OCTAVES LOWER",
            hint="Two octaves = ÷4 cycles. 8 → 2 cycles.",
            color_key="purple",
        ),
        OctaveChallenge(
            id=7,
            name="Triangle → Sine (Octave Lower)",
            original_cycles=4,
            target_cycles=2,
            original_shape=W.TRIANGLE,
            target_shape=W.SINE,
            direction="lower",
            octaves=1,
            description="Draw a SINE wave ONE OCTAVE LOWER",
            hint="Change shape from triangle to sine, and double the period.",
            color_key="cyan",
            exam_style=True,
        ),
        OctaveChallenge(
            id=8,
            name="Square → Triangle (Two Octaves Higher)",
            original_cycles=2,
            target_cycles=8,
            original_shape=W.SQUARE,
            target_shape=W.TRIANGLE,
            direction="higher",
            octaves=2,
            description="Draw a TRIANGLE wave TWO OCTAVES HIGHER",
            hint="Change to triangle AND multiply cycles by 4.",
            color_key="red",
            exam_style=True,
        ),
        OctaveChallenge(
            id=9,
            name="Saw → Square (Octave Higher)",
            original_cycles=4,
            target_cycles=8,
            original_shape=W.SAW,
            target_shape=W.SQUARE,
            direction="higher",
            octaves=1,
            description="Draw a SQUARE wave ONE OCTAVE HIGHER",
            hint="Change shape from saw to square, period halves.",
            color_key="amber",
            exam_style=True,
        ),
        OctaveChallenge(
            id=10,
            name="Sine → Sine (Octave Higher)",
            original_cycles=3,
            target_cycles=6,
            original_shape=W.SINE,
            target_shape=W.SINE,
            direction="higher",
            octaves=1,
            description="Draw a SINE wave ONE OCTAVE HIGHER",
            hint="Same shape. 3 cycles → 6 cycles.",
            color_key="amber",
        ),
    )
    return AssessmentDefinition(
        id=ASSESSMENT_ID,
        title="Octave Waveform Drawing",
        description=(
            "Draw waveforms showing octave transpositions. You'll see an original waveform and must "
            "draw what it would look like at a different octave."
        ),
        type="drawing",
        marking_method="ai",
        topic="2.5 Numeracy",
        estimated_time="15-20 minutes",
        octave_challenges=challenges,
    )
