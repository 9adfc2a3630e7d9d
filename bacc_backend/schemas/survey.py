"""Pydantic schema for survey submissions."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class SurveySubmission(BaseModel):
    """Free-form survey answers keyed by question.

    ``timestamp`` accepts an ISO-8601 string or epoch milliseconds; answers may
    be scalars, lists or nested mappings. Keys ending in ``_followup`` carry
    free-text elaboration of the preceding answer.
    """

    model_config = ConfigDict(extra="ignore")

    timestamp: Optional[datetime] = None
    responses: Dict[str, Any]
