# factor analyzers: one per signal, each turns the snapshot into a normalized Factor
# analyzers are independent of each other and all run on every prediction
# a signal with no data still yields a zero-value factor so the shape never changes

import logging
import unicodedata
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from crisis_engine.models.engine_config import PredictionConfig
from crisis_engine.models.observation import NEUTRAL_MOOD, PredictionInput, utc_day
from crisis_engine.models.prediction import FACTOR_TYPES, Factor, TrendDirection

logger = logging.getLogger(__name__)

MOOD_THRESHOLD = 2.5
SENTIMENT_THRESHOLD = -0.3
STRESS_KEYWORD_THRESHOLD = 3.0
FREQUENCY_THRESHOLD = 0.5  # at least one entry every two days
TREND_THRESHOLD = -0.1

MOOD_TREND_SPAN = 7
MOOD_TREND_BAND = 0.3
SENTIMENT_TREND_SPAN = 5
SENTIMENT_TREND_BAND = 0.1
STRESS_TREND_BAND = 0.5
FREQUENCY_TREND_DAYS = 7
FREQUENCY_TREND_BAND = 2
TREND_SLOPE_BAND = 0.1
TREND_MIN_POINTS = 3

# anxiety / stress lexicon, matched as lowercase substrings
STRESS_KEYWORDS = (
    # anxiety
    "ansiedade", "ansioso", "ansiosa", "preocupado", "preocupada", "nervoso", "nervosa",
    "tenso", "tensa", "estresse", "stress", "estressado", "estressada",
    # physical symptoms
    "coração acelerado", "palpitação", "falta de ar", "sufocado", "tremor", "suor",
    "tontura", "náusea", "insônia", "não consegui dormir", "não consigo dormir",
    # emotional states
    "pânico", "medo", "terror", "desespero", "desesperado", "desesperada",
    "sobreviver", "aguentar", "não aguento", "cansado", "cansada", "exausto", "exausta",
    # negative thoughts
    "fracasso", "inútil", "burro", "burra", "sem valor", "não sirvo",
    "tudo está errado", "não vai dar certo", "vou falhar",
    # english
    "anxiety", "anxious", "panic", "overwhelmed", "hopeless", "worthless",
    "exhausted", "can't sleep", "cannot sleep", "insomnia", "terrified",
    "can't breathe", "heart racing", "nervous", "dread",
)

Analyzer = Callable[[PredictionInput, datetime, PredictionConfig], Factor]


# helpers

def _direction(recent: float, earlier: float, band: float) -> TrendDirection:
    if recent > earlier + band:
        return "improving"
    if recent < earlier - band:
        return "declining"
    return "stable"


def _empty_factor(factor_type: str, weight: float, threshold: float, description: str) -> Factor:
    return Factor(
        type=factor_type,
        weight=weight,
        current_value=0.0,
        threshold=threshold,
        trend="stable",
        description=description,
    )


def _normalize_text(text: str) -> str:
    return unicodedata.normalize("NFC", text or "").lower()


_LEXICON = tuple(dict.fromkeys(_normalize_text(k) for k in STRESS_KEYWORDS))


def count_stress_keywords(text: str) -> Counter:
    """occurrences of each lexicon term in `text` (case-insensitive, substring match)"""
    content = _normalize_text(text)
    hits = Counter()
    for keyword in _LEXICON:
        n = content.count(keyword)
        if n:
            hits[keyword] = n
    return hits


# analyzers

def analyze_mood(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> Factor:
    weight = config.weights.mood
    moods = data.sorted_moods()
    if not moods:
        return _empty_factor("mood_decline", weight, MOOD_THRESHOLD, "No mood data available")

    values = np.array([m.ordinal for m in moods], dtype=float)
    average = float(values.mean())
    trend = _direction(
        float(values[-MOOD_TREND_SPAN:].mean()),
        float(values[:MOOD_TREND_SPAN].mean()),
        MOOD_TREND_BAND,
    )

    return Factor(
        type="mood_decline",
        weight=weight,
        current_value=round(average, 2),
        threshold=MOOD_THRESHOLD,
        trend=trend,
        description=f"Average mood {average:.1f}/5.0 ({len(moods)} entries)",
    )


def analyze_sentiment(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> Factor:
    weight = config.weights.sentiment
    journals = data.sorted_journals()
    if not journals:
        return _empty_factor(
            "negative_sentiment", weight, SENTIMENT_THRESHOLD, "No journal entries for sentiment analysis",
        )

    scores = [j.sentiment_score for j in journals if j.sentiment_score is not None]
    if not scores:
        return _empty_factor(
            "negative_sentiment", weight, SENTIMENT_THRESHOLD, "Sentiment not calculated for journal entries",
        )

    values = np.array(scores, dtype=float)
    average = float(values.mean())
    trend = _direction(
        float(values[-SENTIMENT_TREND_SPAN:].mean()),
        float(values[:SENTIMENT_TREND_SPAN].mean()),
        SENTIMENT_TREND_BAND,
    )

    return Factor(
        type="negative_sentiment",
        weight=weight,
        current_value=round(average, 3),
        threshold=SENTIMENT_THRESHOLD,
        trend=trend,
        description=f"Average sentiment {average:.2f} ({len(scores)} entries)",
    )


def analyze_stress_keywords(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> Factor:
    weight = config.weights.stress_keyword
    journals = data.sorted_journals()
    if not journals:
        return _empty_factor(
            "stress_keywords", weight, STRESS_KEYWORD_THRESHOLD, "No journal entries for keyword analysis",
        )

    per_entry = [count_stress_keywords(j.content) for j in journals]
    totals = Counter()
    for hits in per_entry:
        totals.update(hits)
    total = sum(totals.values())
    density = total / len(journals)

    # rising density in the second half means things are getting worse
    middle = len(per_entry) // 2
    first_half = [sum(h.values()) for h in per_entry[:middle]]
    second_half = [sum(h.values()) for h in per_entry[middle:]]
    first_avg = sum(first_half) / max(len(first_half), 1)
    second_avg = sum(second_half) / max(len(second_half), 1)
    trend = _direction(first_avg, second_avg, STRESS_TREND_BAND)

    description = f"{total} stress keywords found ({density:.1f} per entry)"
    if totals:
        top = ", ".join(f"{k} ({n})" for k, n in totals.most_common(3))
        description += f"; most frequent: {top}"

    return Factor(
        type="stress_keywords",
        weight=weight,
        current_value=round(density, 2),
        threshold=STRESS_KEYWORD_THRESHOLD,
        trend=trend,
        description=description,
    )


def analyze_journal_frequency(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> Factor:
    weight = config.weights.frequency
    window_days = data.analysis_window.days
    journals = data.journal_observations
    entries_per_day = len(journals) / window_days

    entries_by_day = pd.Series([utc_day(j.created_at) for j in journals], dtype="object").value_counts()
    active_days = int(len(entries_by_day))

    # most recent 7 calendar days of the window vs the earliest 7
    end_day = utc_day(end_date)
    start_day = end_day - timedelta(days=window_days)
    span = timedelta(days=FREQUENCY_TREND_DAYS - 1)
    recent = sum(int(n) for day, n in entries_by_day.items() if end_day - span <= day <= end_day)
    earlier = sum(int(n) for day, n in entries_by_day.items() if start_day <= day <= start_day + span)
    trend = _direction(recent, earlier, FREQUENCY_TREND_BAND)

    return Factor(
        type="journal_frequency",
        weight=weight,
        current_value=round(entries_per_day, 2),
        threshold=FREQUENCY_THRESHOLD,
        trend=trend,
        description=f"{len(journals)} entries in {window_days} days ({active_days} active days)",
    )


def daily_series(data: PredictionInput) -> List[float]:
    """one composite value per utc day: mood ordinal + 2 x sentiment, in date order.
    a day without mood counts as neutral, a day without sentiment adds nothing."""
    points: Dict[object, Dict[str, Optional[float]]] = {}
    for mood in data.sorted_moods():
        points.setdefault(utc_day(mood.recorded_at), {})["mood"] = mood.ordinal
    for journal in data.sorted_journals():
        points.setdefault(utc_day(journal.created_at), {})["sentiment"] = journal.sentiment_score

    series = []
    for day in sorted(points):
        point = points[day]
        mood = point.get("mood") or NEUTRAL_MOOD
        sentiment = point.get("sentiment") or 0.0
        series.append(mood + sentiment * 2)
    return series


def linear_slope(values: Sequence[float]) -> float:
    """ordinary least-squares slope of values against their index"""
    if len(values) < 2:
        return 0.0
    x = np.arange(len(values), dtype=float)
    slope = float(np.polyfit(x, np.asarray(values, dtype=float), 1)[0])
    return 0.0 if np.isnan(slope) else slope


def analyze_trend(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> Factor:
    weight = config.weights.trend
    series = daily_series(data)
    if len(series) < TREND_MIN_POINTS:
        return _empty_factor("trend", weight, TREND_THRESHOLD, "Insufficient data for trend analysis")

    slope = linear_slope(series)
    trend = _direction(slope, 0.0, TREND_SLOPE_BAND)
    label = "improving" if slope > 0 else "worsening" if slope < 0 else "flat"

    return Factor(
        type="trend",
        weight=weight,
        current_value=round(slope, 3),
        threshold=TREND_THRESHOLD,
        trend=trend,
        description=f"Temporal trend {label} (slope {slope:+.3f} over {len(series)} days)",
    )


FACTOR_ANALYZERS: Dict[str, Analyzer] = {
    "mood_decline": analyze_mood,
    "negative_sentiment": analyze_sentiment,
    "stress_keywords": analyze_stress_keywords,
    "journal_frequency": analyze_journal_frequency,
    "trend": analyze_trend,
}


def analyze_factors(data: PredictionInput, end_date: datetime, config: PredictionConfig) -> List[Factor]:
    """run every analyzer, returning factors in canonical order"""
    factors = [FACTOR_ANALYZERS[factor_type](data, end_date, config) for factor_type in FACTOR_TYPES]
    logger.debug(
        "Factors: " + ", ".join(f"{f.type}={f.current_value} ({f.trend})" for f in factors)
    )
    return factors
