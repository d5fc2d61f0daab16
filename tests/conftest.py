# shared fixtures for the engine test suite
# builds mood/journal payloads relative to a fixed clock so results are reproducible

from datetime import datetime, timedelta, timezone

import pytest

from crisis_engine.models.observation import PredictionInput
from crisis_engine.services.engine import CrisisPredictionEngine

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


# payload builders (camelCase, as the app sends them)

def mood_entry(level, days_ago, period="manha"):
    at = NOW - timedelta(days=days_ago)
    return {
        "moodLevel": level,
        "period": period,
        "date": at.date().isoformat(),
        "timestamp": int(at.timestamp() * 1000),
    }


def journal_entry(journal_id, content, sentiment, days_ago, tags=None):
    at = NOW - timedelta(days=days_ago)
    return {
        "id": journal_id,
        "content": content,
        "sentimentScore": sentiment,
        "wordCount": len(content.split()),
        "createdAt": at.isoformat(),
        "moodTags": tags or [],
        "promptCategory": "daily_reflection",
    }


def make_payload(moods, journals, days=14, user_id="user-1", end_date=NOW):
    return {
        "userId": user_id,
        "analysisWindow": {"days": days, "endDate": end_date.isoformat() if end_date else None},
        "moodEntries": moods,
        "journalEntries": journals,
    }


def make_input(moods, journals, **kwargs) -> PredictionInput:
    return PredictionInput.model_validate(make_payload(moods, journals, **kwargs))


# scenarios

@pytest.fixture
def low_risk_payload():
    """good moods, two positive journal entries, no stress language"""
    moods = [
        mood_entry("bom", 13, "manha"),
        mood_entry("muito_bom", 12, "tarde"),
        mood_entry("bom", 11, "noite"),
        mood_entry("neutro", 10, "manha"),
        mood_entry("bom", 9, "tarde"),
        mood_entry("muito_bom", 8, "noite"),
    ]
    journals = [
        journal_entry(
            "1",
            "Hoje foi um dia maravilhoso! Consegui terminar todos os meus projetos "
            "e ainda tive tempo para relaxar.",
            0.8,
            10,
            tags=[{"id": "1", "label": "feliz", "category": "positive", "intensity": 4}],
        ),
        journal_entry(
            "2",
            "Me sinto grato por ter pessoas incríveis ao meu redor. A vida está boa.",
            0.7,
            5,
            tags=[{"id": "3", "label": "grato", "category": "positive", "intensity": 5}],
        ),
    ]
    return make_payload(moods, journals)


@pytest.fixture
def high_risk_payload():
    """bad moods, strongly negative journals full of anxiety keywords"""
    moods = [
        mood_entry("ruim", 13, "manha"),
        mood_entry("muito_ruim", 12, "tarde"),
        mood_entry("ruim", 11, "noite"),
        mood_entry("muito_ruim", 10, "manha"),
        mood_entry("ruim", 9, "tarde"),
        mood_entry("muito_ruim", 8, "noite"),
    ]
    journals = [
        journal_entry(
            "3",
            "Não aguento mais essa ansiedade. Sinto meu coração acelerado o tempo todo, "
            "não consigo dormir. Estou desesperado, tudo parece estar errado na minha vida. "
            "Acho que não sirvo para nada.",
            -0.9,
            2,
            tags=[{"id": "4", "label": "ansioso", "category": "negative", "intensity": 5}],
        ),
        journal_entry(
            "4",
            "Mais um dia terrível. A ansiedade está me consumindo, não consigo me concentrar "
            "em nada. Tenho medo de tudo, sinto que vou ter um ataque de pânico a qualquer momento.",
            -0.8,
            1,
            tags=[{"id": "7", "label": "ansioso", "category": "negative", "intensity": 5}],
        ),
    ]
    return make_payload(moods, journals)


@pytest.fixture
def low_risk_input(low_risk_payload):
    return PredictionInput.model_validate(low_risk_payload)


@pytest.fixture
def high_risk_input(high_risk_payload):
    return PredictionInput.model_validate(high_risk_payload)


@pytest.fixture
def engine():
    return CrisisPredictionEngine(clock=lambda: NOW)


# prediction helpers

def factor_of(prediction, factor_type):
    return next(f for f in prediction.factors if f.type == factor_type)


def analytic_fields(prediction):
    """everything except the id and timestamps, which change on every call"""
    return prediction.model_dump(exclude={"id", "created_at", "updated_at", "expires_at", "next_update_at"})
