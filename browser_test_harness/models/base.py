"""Base model for the harness settings."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable settings model rejecting unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")
