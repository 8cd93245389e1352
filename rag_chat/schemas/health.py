"""Pydantic response models for the health check endpoint."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response model for the /healthz endpoint."""

    status: str
    webhook: Literal["configured", "missing"]
