"""Health check result types."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class HealthCheckSuccess:
    """The resource is reachable and its title was extracted."""

    url: str
    title: str

    @property
    def success(self) -> Literal[True]:
        return True

    def to_dict(self) -> dict:
        return {"url": self.url, "success": True, "title": self.title}


@dataclass(frozen=True)
class HealthCheckFailure:
    """The check failed. ``url`` is always the URL that was requested."""

    url: str
    error: Exception

    @property
    def success(self) -> Literal[False]:
        return False

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "success": False,
            "error": str(self.error),
            "error_type": type(self.error).__name__,
        }


HealthCheckResult = HealthCheckSuccess | HealthCheckFailure
