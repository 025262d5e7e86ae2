"""Base for the options models accepted at registration."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable options model that rejects keys it does not declare."""

    model_config = ConfigDict(frozen=True, extra="forbid")
