"""Configuration for the embedded server."""

from pydantic import BaseModel, Field


class EmbeddedServerConfig(BaseModel):
    """Configuration for the embedded server."""

    host: str = "127.0.0.1"
    # 0 binds an ephemeral port, used by tests
    port: int = Field(default=1234, ge=0, le=65535)
