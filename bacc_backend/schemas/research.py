"""Data contracts for the unified research (calculator + survey) store."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalculatorEntry(BaseModel):
    """One calculator step: what was entered and what came back."""

    model_config = ConfigDict(extra="ignore")

    input: Any = None
    result: Any = None
    timestamp: Optional[datetime] = None


class SurveyEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    response: Any = None
    questionText: Optional[str] = None
    timestamp: Optional[datetime] = None


class ResearchSubmission(BaseModel):
    """Payload of ``POST /api/research-data``."""

    model_config = ConfigDict(extra="ignore")

    sessionId: str = Field(..., min_length=1)
    calculatorData: Optional[Dict[str, CalculatorEntry]] = None
    surveyData: Optional[Dict[str, SurveyEntry]] = None
    metadata: Optional[Dict[str, Any]] = None
    completionStatus: Optional[Dict[str, Any]] = None

    @field_validator("sessionId")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("sessionId must not be blank")
        return value


class ResearchRecord(BaseModel):
    """A stored research session as read back from the store."""

    sessionId: str
    calculatorData: Dict[str, Any] = Field(default_factory=dict)
    surveyData: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    completionStatus: Dict[str, Any] = Field(default_factory=dict)
    createdAt: datetime
    updatedAt: datetime
