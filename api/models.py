"""
Pydantic request/response models for the API.

Section payloads are opaque JSON and typed as ``Any``; the normalized views
in ``dashboard.views`` are the typed alternative.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


# ── Auth ──────────────────────────────────────────────────────────────────────

class LoginIn(BaseModel):
    """Credentials forwarded to the login webhook."""
    username: str = Field("", description="Dashboard user name", examples=["admin"])
    password: str = Field("", description="Dashboard password")


class AuthStatusOut(BaseModel):
    authenticated: bool = Field(..., description="Whether a user is logged in")


# ── Sections ──────────────────────────────────────────────────────────────────

class SectionFlagsOut(BaseModel):
    attempted: bool = Field(..., description="A fetch has been tried, successful or not")
    in_flight: bool = Field(..., description="A fetch is currently outstanding")


class SectionOut(BaseModel):
    """One section's raw payload and gate flags."""
    section: str = Field(..., examples=["products"])
    loaded: bool = Field(..., description="Payload is present")
    data: Any = Field(None, description="Raw webhook payload, or null if never loaded")
    attempted: bool
    in_flight: bool


class DashboardStateOut(BaseModel):
    """Snapshot of the whole provider."""
    data: dict[str, Any] = Field(..., description="Raw payload per section")
    error: str | None = Field(None, description="Last fetch error message")
    loading: bool = Field(..., description="Any section has a fetch in flight")
    flags: dict[str, SectionFlagsOut]


class FetchOut(BaseModel):
    """Outcome of a fetch request."""
    started: bool = Field(..., description="False when the fetch gate made the call a no-op")
    error: str | None = Field(None, description="Last fetch error message")
    section: SectionOut


# ── General update ────────────────────────────────────────────────────────────

class UpdateStatusOut(BaseModel):
    is_updating: bool
    is_success: bool
    elapsed_seconds: int = Field(..., description="Seconds since the update started")
    error: str | None = None
