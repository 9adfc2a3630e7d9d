"""Pydantic schema for the liveness endpoint."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    message: str
