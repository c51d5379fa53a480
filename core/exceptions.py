# core/exceptions.py
from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., circular dependencies)."""


class DanglingReferenceError(BusinessRuleError):
    """A dependency points at a task that is not part of the schedule input."""

    def __init__(self, task_id: str, dependency_id: str | None = None):
        super().__init__(
            f"Cannot schedule project: dependency references unknown task '{task_id}'.",
            code="DANGLING_REFERENCE",
        )
        self.task_id = task_id
        self.dependency_id = dependency_id


class CycleDetectedError(BusinessRuleError):
    """The dependency graph contains a cycle; `cycle` lists it in edge order."""

    def __init__(self, cycle: list[str]):
        path = " -> ".join([*cycle, cycle[0]]) if cycle else ""
        super().__init__(
            f"Cannot schedule project: circular dependency detected ({path}).",
            code="SCHEDULE_CYCLE",
        )
        self.cycle = list(cycle)


class InvalidDurationError(ValidationError):
    def __init__(self, task_id: str, field: str, value: object):
        super().__init__(
            f"Task '{task_id}' has an invalid {field}: {value!r}.",
            code="INVALID_DURATION",
        )
        self.task_id = task_id
        self.field = field
        self.value = value
