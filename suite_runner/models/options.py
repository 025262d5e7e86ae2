"""Per-item options accepted at registration."""

from pydantic import Field, field_validator

from suite_runner.durations import parse_duration
from suite_runner.models.base import Model

DEFAULT_TIMEOUT = "20 seconds"


class TestOptions(Model):
    """Options for a registered section or inline item."""

    __test__ = False

    timeout: float | None = Field(
        default=DEFAULT_TIMEOUT,
        validate_default=True,
        description="Timeout (e.g. '20 seconds', '5m', 1.5); None or inf disables it",
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> float | None:
        if value is not None and not isinstance(value, str | int | float):
            raise ValueError(f"Invalid duration: {value!r}")
        timeout = parse_duration(value)
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive; use None to disable it")
        return timeout
