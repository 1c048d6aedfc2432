"""Production adapters for application ports."""

from student_affairs.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)

__all__ = ["SystemTimeAuthority"]
