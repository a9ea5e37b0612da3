"""Validation outcome types and the exception hierarchy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Mode(Enum):
    """How a document without any schema binding is judged."""

    LENIENT = "lenient"  # No binding means nothing to check
    STRICT = "strict"  # A binding is required


class UnresolvedPolicy(Enum):
    """What happens when none of the declared schemas can be loaded."""

    PASS = "pass"
    FAIL = "fail"


class ViolationKind(Enum):
    """Types of findings collected for a document."""

    CONTENT = "content"  # Instance does not match the composed grammar
    CONFIGURATION = "configuration"  # Malformed schema binding attributes
    SCHEMA = "schema"  # Bound schema could not be compiled
    MISSING_SCHEMA = "missing_schema"  # Strict mode, nothing declared
    UNRESOLVED = "unresolved"  # Schema unreachable and policy is FAIL
    FORMATTING = "formatting"
    PARSE = "parse"  # Reported by tools that keep going after a parse error
    CONFLICT = "conflict"  # Likewise for composition conflicts


@dataclass(frozen=True)
class Violation:
    """A single finding, tied to a line of the document."""

    line: int
    message: str
    column: int | None = None
    kind: ViolationKind = ViolationKind.CONTENT

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


@dataclass
class ValidationResult:
    """Result of validating a document.

    A result with no violations is a pass; anything else is a failure
    listing the violations in the order they were found.
    """

    document: str
    violations: list[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    def summary(self, limit: int = 3) -> str:
        """The first ``limit`` violations on one line."""
        text = "; ".join(str(v) for v in self.violations[:limit])
        if self.violation_count > limit:
            text += f"... (+{self.violation_count - limit} more)"
        return text

    def __str__(self) -> str:
        if self.is_valid:
            return f"{self.document}: valid"
        lines = [f"{self.document}: {self.violation_count} violation(s)"]
        lines.extend(f"  {v}" for v in self.violations)
        return "\n".join(lines)


class XsdAuditError(Exception):
    """Base class for errors that abort validation of a document."""


class DocumentParseError(XsdAuditError):
    """Raised when a document is not well-formed XML."""

    def __init__(self, document: str, message: str, line: int | None = None):
        location = f"{document}:{line}" if line else document
        super().__init__(f"{location}: not well-formed XML: {message}")
        self.document = document
        self.line = line


class ResolutionError(XsdAuditError):
    """Raised by resource capabilities when a location cannot be read."""

    def __init__(self, location: str, reason: str):
        super().__init__(f"Cannot load {location}: {reason}")
        self.location = location
        self.reason = reason


class CompositionConflict(XsdAuditError):
    """Raised when one namespace is bound to two different schemas."""

    def __init__(self, namespace: str | None, first: str, second: str):
        label = namespace if namespace is not None else "(no namespace)"
        super().__init__(
            f"Namespace {label} is bound to both {first} and {second}"
        )
        self.namespace = namespace
        self.locations = (first, second)


class DocumentValidationError(XsdAuditError):
    """Raised by ``SchemaValidator.check`` when a document fails."""

    def __init__(self, message: str, violations: list[Violation] | None = None):
        super().__init__(message)
        self.violations = violations or []
