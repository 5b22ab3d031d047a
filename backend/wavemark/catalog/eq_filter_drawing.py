"""EQ filter drawing: sketch six filter response curves from memory."""

from __future__ import annotations

from .models import AssessmentDefinition, FilterCanvas, FilterChallenge

ASSESSMENT_ID = "eq-filter-drawing"


def build_eq_filter_drawing() -> AssessmentDefinition:
    challenges = (
        FilterChallenge(
            id=1,
            name="High-Pass Filter",
            filter_type="highpass",
            frequency=200,
            description="Draw a High-Pass Filter with cutoff at 200Hz",
            hint="Remember: HPF removes frequencies BELOW the cutoff",
            color_key="cyan",
        ),
        FilterChallenge(
            id=2,
            name="Low-Pass Filter",
            filter_type="lowpass",
            frequency=8000,
            description="Draw a Low-Pass Filter with cutoff at 8kHz",
            hint="Remember: LPF removes frequencies ABOVE the cutoff",
            color_key="amber",
        ),
        FilterChallenge(
            id=3,
            name="Low Shelf Boost",
            filter_type="lowshelf",
            frequency=200,
            gain=6,
            description="Draw a Low Shelf with +6dB boost at 200Hz",
            hint="Shelf filters adjust level - they don't remove completely",
            color_key="green",
        ),
        FilterChallenge(
            id=4,
            name="High Shelf Cut",
            filter_type="highshelf",
            frequency=10000,
            gain=-6,
            description="Draw a High Shelf with -6dB cut at 10kHz",
            hint="High shelf affects frequencies ABOVE the frequency point",
            color_key="purple",
        ),
        FilterChallenge(
            id=5,
            name="Bell/Parametric Boost",
            filter_type="bell",
            frequency=1000,
            gain=6,
            q=1.4,
            description="Draw a Bell filter with +6dB boost at 1kHz (moderate Q)",
            hint="Bell filters create a symmetrical bump centered on the frequency",
            color_key="amber",
        ),
        FilterChallenge(
            id=6,
            name="Notch Filter",
            filter_type="notch",
            frequency=50,
            description="Draw a Notch Filter at 50Hz",
            hint="Notch filters create a sharp, narrow cut at one frequency",
            color_key="red",
        ),
    )
    return AssessmentDefinition(
        id=ASSESSMENT_ID,
        title="EQ Filter Drawing",
        description=(
            "Draw filter response curves from memory. You'll draw 6 different filter types including "
            "high-pass, low-pass, shelves, and parametric EQ."
        ),
        type="drawing",
        marking_method="ai",
        topic="1.11 EQ",
        icon="📊",
        estimated_time="15-20 minutes",
        filter_challenges=challenges,
        canvas=FilterCanvas(),
    )
