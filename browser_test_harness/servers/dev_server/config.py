"""Configuration for the external dev server."""

from collections.abc import Sequence

from pydantic import BaseModel, Field


class DevServerConfig(BaseModel):
    """Configuration for the external dev server."""

    command: Sequence[str] = ("parcel", "serve")
    host: str = "localhost"
    port: int = Field(default=1234, ge=1, le=65535)
    ready_text: str = Field(default="Server running at ", min_length=1)
    stop_timeout: float = Field(default=5.0, gt=0)
