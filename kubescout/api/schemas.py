"""Request and response models for the kubescout REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
    cluster: str = ""


class SnapshotRequest(BaseModel):
    """Body for ``POST /snapshot``.

    ``cluster`` falls back to the configured cluster name; ``relations`` and
    ``crossplane`` fall back to the configured snapshot defaults.
    """

    resources: list[dict[str, Any]] = Field(default_factory=list)
    cluster: str | None = Field(default=None, max_length=253)
    relations: bool | None = None
    crossplane: bool | None = None
    namespace: str | None = Field(default=None, max_length=253)
    kind: str | None = Field(default=None, max_length=253)


class OwnershipRequest(BaseModel):
    resource: dict[str, Any]


class PatternsRequest(BaseModel):
    resources: list[dict[str, Any]] = Field(default_factory=list)
    organization: str | None = Field(default=None, max_length=253)
