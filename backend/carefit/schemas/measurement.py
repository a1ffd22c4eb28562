"""
Measurement request and response models.

Numeric fields are optional and lenient: a missing or non-numeric value
becomes 0 rather than failing the request. Trial readings keep None for an
invalid entry so the service can pick the valid trial as best. Scores (cs10,
bi) are clamped to the range their metric accepts.
"""

from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID
from pydantic import Field, ValidationInfo, field_validator

from carefit.domain.metrics import SCORE_METRICS
from carefit.schemas.base import CamelModel, reject_null
from carefit.services.derived_values import coerce_int, coerce_number, parse_number


_SCORES = {metric.key: metric for metric in SCORE_METRICS}


def _score_input(value: Any, field_name: str) -> int:
    metric = _SCORES[field_name]
    return coerce_int(value, metric.min_value, metric.max_value)


def _trial_input(value: Any) -> Any:
    # Anything that is not an object counts as "no readings"
    if isinstance(value, CamelModel):
        return value
    if not isinstance(value, dict):
        return {}
    return value


class PairedTrialInput(CamelModel):
    """Two trial readings as entered; best is always recomputed."""

    first: Optional[float] = None
    second: Optional[float] = None
    best: Optional[float] = None

    @field_validator("first", "second", "best", mode="before")
    @classmethod
    def parse_reading(cls, value):
        return parse_number(value)


class PairedTrial(CamelModel):
    """Stored paired-trial value."""

    first: float
    second: float
    best: float


class MeasurementCreateRequest(CamelModel):
    """Request model for recording a visit."""

    user_id: UUID = Field(..., description="Owner of the measurement")
    measurement_date: date = Field(..., description="Visit date")
    height: float = Field(0, description="Height in centimeters")
    weight: float = Field(0, description="Weight in kilograms")
    tug: PairedTrialInput = Field(default_factory=PairedTrialInput)
    walking_speed: PairedTrialInput = Field(default_factory=PairedTrialInput)
    fr: PairedTrialInput = Field(default_factory=PairedTrialInput)
    cs10: int = Field(0, description="Sit-to-stand repetitions")
    bi: int = Field(0, description="Barthel Index (0-100)")
    notes: str = ""

    @field_validator("height", "weight", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return coerce_number(value)

    @field_validator("cs10", "bi", mode="before")
    @classmethod
    def coerce_scores(cls, value, info: ValidationInfo):
        return _score_input(value, info.field_name)

    @field_validator("tug", "walking_speed", "fr", mode="before")
    @classmethod
    def coerce_trials(cls, value):
        return _trial_input(value)

    @field_validator("notes", mode="before")
    @classmethod
    def coerce_notes(cls, value):
        return "" if value is None else value

    def to_record(self):
        # Defaults count as sent: every field is written on create
        return self.model_dump(by_alias=True)


class MeasurementUpdateRequest(CamelModel):
    """Request model for a full or partial measurement update (e.g. only bi)."""

    user_id: Optional[UUID] = None
    measurement_date: Optional[date] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    tug: Optional[PairedTrialInput] = None
    walking_speed: Optional[PairedTrialInput] = None
    fr: Optional[PairedTrialInput] = None
    cs10: Optional[int] = None
    bi: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("user_id", "measurement_date", mode="before")
    @classmethod
    def check_not_null(cls, value):
        return reject_null(value)

    @field_validator("height", "weight", mode="before")
    @classmethod
    def coerce_numbers(cls, value):
        return coerce_number(value)

    @field_validator("cs10", "bi", mode="before")
    @classmethod
    def coerce_scores(cls, value, info: ValidationInfo):
        return _score_input(value, info.field_name)

    @field_validator("tug", "walking_speed", "fr", mode="before")
    @classmethod
    def coerce_trials(cls, value):
        return _trial_input(value)

    @field_validator("notes", mode="before")
    @classmethod
    def coerce_notes(cls, value):
        return "" if value is None else value


class MeasurementResponse(CamelModel):
    """Response model for a measurement."""

    id: UUID
    user_id: UUID
    measurement_date: date
    height: float
    weight: float
    tug: PairedTrial
    walking_speed: PairedTrial
    fr: PairedTrial
    cs10: int
    bi: int
    notes: str
    created_at: datetime
    updated_at: datetime
