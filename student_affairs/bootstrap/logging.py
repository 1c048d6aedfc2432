"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

import os

from student_affairs.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)

# Environment variable selecting the log renderer (default: production)
ENVIRONMENT_ENV = "STUDENT_AFFAIRS_ENV"


def configure_structlog(environment: str | None = None) -> None:
    """Configure structlog for the given environment.

    Args:
        environment: 'production' or 'development'; read from
            STUDENT_AFFAIRS_ENV when None.
    """
    _configure_structlog(
        environment=environment or os.getenv(ENVIRONMENT_ENV, "production")
    )


__all__ = ["configure_structlog"]
