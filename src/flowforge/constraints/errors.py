"""Violation types produced by the topology constraint checks."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field as dc_field


class Severity(enum.Enum):
    """How much a violation degrades generation."""

    ERROR = "error"      # generate cannot produce correct output
    WARNING = "warning"  # output falls back to placeholders or warning lines


@dataclass(frozen=True)
class ConstraintViolation:
    """One problem found in the topology.

    Attributes:
        severity: ERROR or WARNING
        code: Stable identifier such as 'duplicate_scope' or 'unknown_vlan'
        message: What is wrong, for humans
        entity: Offending entity as 'kind:key' (e.g. 'server:db01')
        field: JSON field of the entity involved, if any
    """

    severity: Severity
    code: str
    message: str
    entity: str = ""
    field: str = ""

    @property
    def location(self) -> str:
        """'kind:key.field', 'kind:key' or '' depending on what is known.

        >>> ConstraintViolation(Severity.ERROR, 'x', 'm', 'server:db01', 'octet').location
        'server:db01.octet'
        """
        if self.entity and self.field:
            return f"{self.entity}.{self.field}"
        return self.entity

    def __str__(self) -> str:
        where = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value.upper()}{where}: {self.message}"


@dataclass
class ValidationResult:
    """Violations collected by one or more constraint groups."""

    violations: list[ConstraintViolation] = dc_field(default_factory=list)

    def add(self, violation: ConstraintViolation) -> None:
        self.violations.append(violation)

    def error(self, code: str, message: str, entity: str = "", field: str = "") -> None:
        self.add(ConstraintViolation(Severity.ERROR, code, message, entity, field))

    def warning(self, code: str, message: str, entity: str = "", field: str = "") -> None:
        self.add(ConstraintViolation(Severity.WARNING, code, message, entity, field))

    def merge(self, other: ValidationResult) -> None:
        """Append another result's violations to this one."""
        self.violations.extend(other.violations)

    def _of(self, severity: Severity) -> list[ConstraintViolation]:
        return [v for v in self.violations if v.severity is severity]

    @property
    def errors(self) -> list[ConstraintViolation]:
        return self._of(Severity.ERROR)

    @property
    def warnings(self) -> list[ConstraintViolation]:
        return self._of(Severity.WARNING)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def codes(self) -> set[str]:
        return {v.code for v in self.violations}

    def report(self) -> str:
        """Errors first, then warnings, each block headed by its count."""
        if not self.violations:
            return "No violations found."

        blocks = []
        for severity in (Severity.ERROR, Severity.WARNING):
            group = self._of(severity)
            if group:
                blocks.append(f"{len(group)} {severity.value}(s):")
                blocks.extend(f"  {v}" for v in group)
        return "\n".join(blocks)
