# intervention catalog and selection
# selection is a pure function of (factors, risk level) over a static catalog;
# catalog order is the tie-break, so results are stable across runs

import logging
from typing import Dict, FrozenSet, Iterable, List, Sequence

from crisis_engine.models.prediction import Factor, Intervention, RiskLevel

logger = logging.getLogger(__name__)

MAX_INTERVENTIONS = 3

# priority tiers eligible at each risk level
TIERS_BY_RISK_LEVEL: Dict[str, FrozenSet[str]] = {
    "critical": frozenset({"immediate"}),
    "high": frozenset({"immediate", "urgent"}),
    "medium": frozenset({"urgent", "moderate"}),
    "low": frozenset({"moderate", "preventive"}),
}

INTERVENTION_CATALOG: Sequence[Intervention] = (
    Intervention(
        id="breathing_emergency",
        priority="immediate",
        type="breathing",
        title="Emergency breathing",
        description="4-7-8 breathing technique for immediate anxiety control",
        estimated_minutes=5,
        instructions=(
            "Breathe in through your nose for 4 seconds",
            "Hold your breath for 7 seconds",
            "Breathe out through your mouth for 8 seconds",
            "Repeat 4 times",
        ),
        trigger_factor_types=("mood_decline", "stress_keywords"),
    ),
    Intervention(
        id="journal_reflection",
        priority="urgent",
        type="journaling",
        title="Guided reflection",
        description="Journaling exercise to process what you are feeling",
        estimated_minutes=15,
        instructions=(
            "Describe what you are feeling right now",
            "Identify what may have caused these feelings",
            "List 3 things you are grateful for",
            "Write one kind sentence to yourself",
        ),
        trigger_factor_types=("negative_sentiment", "journal_frequency"),
    ),
    Intervention(
        id="emergency_contact",
        priority="immediate",
        type="emergency_contact",
        title="Reach out for support",
        description="Contact your support network or a crisis line",
        estimated_minutes=0,
        instructions=(
            "Call CVV on 188 or your local crisis line",
            "Contact someone you trust",
            "Move to a safe place",
        ),
        trigger_factor_types=("mood_decline", "stress_keywords"),
    ),
    Intervention(
        id="professional_help",
        priority="urgent",
        type="professional_help",
        title="Seek professional help",
        description="Book a consultation with a mental health professional",
        estimated_minutes=0,
        instructions=(
            "Schedule an appointment with a psychologist or psychiatrist",
            "Consider online therapy",
            "Look for the nearest community mental health service",
        ),
        trigger_factor_types=("mood_decline", "negative_sentiment", "stress_keywords"),
    ),
    Intervention(
        id="grounding_54321",
        priority="moderate",
        type="self_care",
        title="5-4-3-2-1 grounding",
        description="Use your senses to come back to the present moment",
        estimated_minutes=3,
        instructions=(
            "Name 5 things you can see",
            "Notice 4 things you can touch",
            "Listen for 3 things you can hear",
            "Find 2 things you can smell",
            "Notice 1 thing you can taste",
        ),
        trigger_factor_types=("stress_keywords", "mood_decline"),
    ),
    Intervention(
        id="box_breathing",
        priority="moderate",
        type="breathing",
        title="Box breathing",
        description="Slow, paced breathing to lower tension",
        estimated_minutes=5,
        instructions=(
            "Breathe in for 4 seconds",
            "Hold for 4 seconds",
            "Breathe out for 4 seconds",
            "Hold for 4 seconds and repeat for a few minutes",
        ),
        trigger_factor_types=("stress_keywords", "trend"),
    ),
    Intervention(
        id="daily_journaling",
        priority="preventive",
        type="journaling",
        title="Daily check-in",
        description="A short daily journal entry to keep track of how you feel",
        estimated_minutes=10,
        instructions=(
            "Write a few lines about your day",
            "Note one thing that went well",
            "Record your mood before going to bed",
        ),
        trigger_factor_types=("journal_frequency", "negative_sentiment"),
    ),
    Intervention(
        id="self_care_routine",
        priority="preventive",
        type="self_care",
        title="Self-care routine",
        description="Small habits that protect your mood over time",
        estimated_minutes=20,
        instructions=(
            "Keep a regular sleep schedule",
            "Take a short walk outdoors",
            "Spend time with someone you enjoy",
        ),
        trigger_factor_types=("mood_decline", "trend"),
    ),
)


def select_interventions(
    factors: Iterable[Factor],
    risk_level: RiskLevel,
    catalog: Sequence[Intervention] = INTERVENTION_CATALOG,
) -> List[Intervention]:
    """pick up to 3 catalog entries for the risk tier, preferring ones triggered by the factors.
    at critical risk every tier entry qualifies; if nothing matches the triggers the first
    tier entry is used so the user always gets something."""
    tiers = TIERS_BY_RISK_LEVEL.get(risk_level, frozenset())
    factor_types = {f.type for f in factors}

    in_tier = [i for i in catalog if i.priority in tiers]
    if risk_level == "critical":
        selected = in_tier
    else:
        selected = [i for i in in_tier if factor_types.intersection(i.trigger_factor_types)]

    if not selected and in_tier:
        selected = in_tier[:1]

    if not in_tier:
        logger.warning(f"No catalog interventions for risk level {risk_level}")

    return selected[:MAX_INTERVENTIONS]
