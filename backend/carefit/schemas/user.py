"""User request and response models."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID
from pydantic import Field, field_validator

from carefit.schemas.base import CamelModel, clean_string_list, reject_blank, reject_null


class UserCreateRequest(CamelModel):
    """Request model for registering a user."""

    last_name: str = Field(..., description="Family name")
    first_name: str = Field(..., description="Given name")
    gender: str = Field(..., description="Gender as entered on the form")
    birth_date: date = Field(..., description="Date of birth")
    medical_history: List[str] = Field(
        default_factory=list, description="Condition names, in entry order"
    )

    @field_validator("last_name", "first_name", "gender", mode="before")
    @classmethod
    def check_required_text(cls, value):
        return reject_blank(value)

    @field_validator("medical_history", mode="before")
    @classmethod
    def clean_medical_history(cls, value):
        return clean_string_list(value)


class UserUpdateRequest(CamelModel):
    """Request model for a full or partial user update."""

    last_name: Optional[str] = None
    first_name: Optional[str] = None
    gender: Optional[str] = None
    birth_date: Optional[date] = None
    medical_history: Optional[List[str]] = None

    @field_validator("last_name", "first_name", "gender", mode="before")
    @classmethod
    def check_required_text(cls, value):
        return reject_blank(value)

    @field_validator("birth_date", mode="before")
    @classmethod
    def check_birth_date(cls, value):
        return reject_null(value)

    @field_validator("medical_history", mode="before")
    @classmethod
    def clean_medical_history(cls, value):
        return clean_string_list(value)


class UserResponse(CamelModel):
    """Response model for a user."""

    id: UUID
    last_name: str
    first_name: str
    gender: str
    birth_date: date
    medical_history: List[str]
    created_at: datetime
    updated_at: datetime
