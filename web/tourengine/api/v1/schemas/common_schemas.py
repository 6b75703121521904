"""Shared request/response models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ....core.config import get_settings
from ....core.timeutils import ensure_aware
from ....core.validation import ValidationIssue
from ....models import DateRange


def localize_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Interpret naive datetimes in the configured timezone"""
    if value is None:
        return None
    return ensure_aware(value, get_settings().tzinfo)


class DateRangeIn(BaseModel):
    """Date range as sent by clients: ``{"from": ..., "to": ...}``"""
    start: datetime = Field(..., alias="from")
    end: datetime = Field(..., alias="to")

    model_config = {
        "populate_by_name": True,
    }

    @field_validator("start", "end")
    @classmethod
    def _localize(cls, v: datetime) -> datetime:
        return localize_naive(v)

    def to_domain(self) -> DateRange:
        return DateRange(start=self.start, end=self.end)


class DateRangeOut(BaseModel):
    start: datetime = Field(..., alias="from")
    end: datetime = Field(..., alias="to")

    model_config = {
        "populate_by_name": True,
    }

    @classmethod
    def from_domain(cls, date_range: DateRange) -> "DateRangeOut":
        return cls(start=date_range.start, end=date_range.end)


class ValidationIssueOut(BaseModel):
    field: str
    message: str
    severity: str

    @classmethod
    def from_domain(cls, issue: ValidationIssue) -> "ValidationIssueOut":
        return cls(field=issue.field, message=issue.message, severity=issue.severity.value)
