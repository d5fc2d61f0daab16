# input snapshot models: mood observations, journal observations, analysis window
# mirrors the mood_entries / journal_entries rows handed over by the app
# both snake_case (database rows) and camelCase (api payloads) keys are accepted

from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

MoodLevel = Literal["pessimo", "mal", "neutro", "bem", "excelente"]
MoodPeriod = Literal["manha", "tarde", "noite"]
TagCategory = Literal["positive", "negative", "neutral"]

MOOD_ORDINALS = {
    "pessimo": 1,
    "mal": 2,
    "neutro": 3,
    "bem": 4,
    "excelente": 5,
}
NEUTRAL_MOOD = MOOD_ORDINALS["neutro"]

# labels written by older clients
LEGACY_MOOD_LEVELS = {
    "muito_ruim": "pessimo",
    "ruim": "mal",
    "bom": "bem",
    "muito_bom": "excelente",
}


def utc_day(moment: datetime) -> date:
    """calendar day of a timestamp in utc (naive timestamps are taken as utc)"""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


class AnalysisWindow(BaseModel):
    """time span analysed by one prediction; end_date defaults to now at predict time"""
    days: Optional[int] = None
    end_date: Optional[datetime] = Field(
        None, validation_alias=AliasChoices("end_date", "endDate"), serialization_alias="endDate",
    )

    model_config = {"frozen": True}


class MoodObservation(BaseModel):
    mood_level: MoodLevel = Field(
        ..., validation_alias=AliasChoices("mood_level", "moodLevel"), serialization_alias="moodLevel",
    )
    period: MoodPeriod
    observed_on: date = Field(
        ..., validation_alias=AliasChoices("observed_on", "date"), serialization_alias="date",
    )
    timestamp_millis: int = Field(
        ...,
        validation_alias=AliasChoices("timestamp_millis", "timestampMillis", "timestamp"),
        serialization_alias="timestampMillis",
    )

    model_config = {"frozen": True}

    @field_validator("mood_level", mode="before")
    @classmethod
    def _normalize_level(cls, value):
        if isinstance(value, str):
            value = value.strip().lower()
            return LEGACY_MOOD_LEVELS.get(value, value)
        return value

    @property
    def ordinal(self) -> int:
        return MOOD_ORDINALS[self.mood_level]

    @property
    def recorded_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_millis / 1000, tz=timezone.utc)


class MoodTag(BaseModel):
    id: Optional[str] = None
    label: str
    category: TagCategory
    intensity: int = 0

    model_config = {"frozen": True}


class JournalObservation(BaseModel):
    id: str
    content: str
    sentiment_score: Optional[float] = Field(
        None,
        ge=-1.0,
        le=1.0,
        validation_alias=AliasChoices("sentiment_score", "sentimentScore"),
        serialization_alias="sentimentScore",
    )
    word_count: int = Field(
        0, ge=0, validation_alias=AliasChoices("word_count", "wordCount"), serialization_alias="wordCount",
    )
    created_at: datetime = Field(
        ..., validation_alias=AliasChoices("created_at", "createdAt"), serialization_alias="createdAt",
    )
    mood_tags: List[MoodTag] = Field(
        default_factory=list,
        validation_alias=AliasChoices("mood_tags", "moodTags"),
        serialization_alias="moodTags",
    )
    prompt_category: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("prompt_category", "promptCategory"),
        serialization_alias="promptCategory",
    )

    model_config = {"frozen": True}

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        # database ids arrive as ints or uuids
        return str(value) if value is not None else value


class UserProfile(BaseModel):
    """optional context, carried with the snapshot but not scored"""
    age: Optional[int] = None
    has_anxiety_history: Optional[bool] = Field(
        None, validation_alias=AliasChoices("has_anxiety_history", "hasAnxietyHistory"),
    )
    has_depression_history: Optional[bool] = Field(
        None, validation_alias=AliasChoices("has_depression_history", "hasDepressionHistory"),
    )
    medication_status: Optional[str] = Field(
        None, validation_alias=AliasChoices("medication_status", "medicationStatus"),
    )
    therapy_status: Optional[str] = Field(
        None, validation_alias=AliasChoices("therapy_status", "therapyStatus"),
    )

    model_config = {"frozen": True}


class PredictionInput(BaseModel):
    """immutable snapshot of one user's recent history"""
    user_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("user_id", "userId"), serialization_alias="userId",
    )
    analysis_window: AnalysisWindow = Field(
        default_factory=AnalysisWindow,
        validation_alias=AliasChoices("analysis_window", "analysisWindow"),
        serialization_alias="analysisWindow",
    )
    mood_observations: List[MoodObservation] = Field(
        default_factory=list,
        validation_alias=AliasChoices("mood_observations", "moodObservations", "moodEntries", "mood_entries"),
        serialization_alias="moodObservations",
    )
    journal_observations: List[JournalObservation] = Field(
        default_factory=list,
        validation_alias=AliasChoices(
            "journal_observations", "journalObservations", "journalEntries", "journal_entries",
        ),
        serialization_alias="journalObservations",
    )
    user_profile: Optional[UserProfile] = Field(
        None, validation_alias=AliasChoices("user_profile", "userProfile"), serialization_alias="userProfile",
    )

    model_config = {"frozen": True}

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_user_id(cls, value):
        return str(value) if value is not None else value

    @property
    def total_observations(self) -> int:
        return len(self.mood_observations) + len(self.journal_observations)

    def sorted_moods(self) -> List[MoodObservation]:
        return sorted(self.mood_observations, key=lambda m: m.timestamp_millis)

    def sorted_journals(self) -> List[JournalObservation]:
        return sorted(self.journal_observations, key=lambda j: _sort_key(j.created_at))


def _sort_key(moment: datetime) -> datetime:
    # aware and naive timestamps must compare, naive ones are taken as utc
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment
