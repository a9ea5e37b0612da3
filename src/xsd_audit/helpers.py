"""Integration helpers for xsd_audit.

Provides convenient utilities for integrating validation into various workflows:
- Context managers for validation
- Decorators guarding functions that read or write XML files
- pytest fixtures for testing
"""

from __future__ import annotations

import functools
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Generator, TypeVar

from xsd_audit.document import Document
from xsd_audit.errors import DocumentValidationError, Mode, ValidationResult
from xsd_audit.resources import ResourceAccess
from xsd_audit.validator import SchemaValidator

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def validation_context(
    mode: Mode = Mode.LENIENT,
    resources: ResourceAccess | None = None,
    raise_on_invalid: bool = False,
) -> Generator[ValidatorWrapper, None, None]:
    """Context manager for validation operations.

    Provides a configured validator that accepts file paths.

    Args:
        mode: LENIENT or STRICT handling of documents without schemas.
        resources: Where schemas are loaded from.
        raise_on_invalid: If True, raise DocumentValidationError on
                          invalid files.

    Yields:
        Configured validator wrapper.

    Example:
        from xsd_audit.helpers import validation_context

        with validation_context(raise_on_invalid=True) as validator:
            result = validator.validate("src/main/resources/beans.xml")
            print(f"Valid: {result.is_valid}")
    """
    yield ValidatorWrapper(
        SchemaValidator(resources=resources, mode=mode),
        raise_on_invalid=raise_on_invalid,
    )


class ValidatorWrapper:
    """Wrapper taking paths and optionally raising on invalid files."""

    def __init__(self, inner: SchemaValidator, raise_on_invalid: bool = False) -> None:
        self._inner = inner
        self._raise_on_invalid = raise_on_invalid

    def validate(self, path: str | Path) -> ValidationResult:
        result = self._inner.validate(Document.from_file(path))
        if self._raise_on_invalid and not result.is_valid:
            raise DocumentValidationError(
                f"Invalid XML {path}: {result.summary()}", result.violations
            )
        return result

    def is_valid(self, path: str | Path) -> bool:
        return self._inner.validate(Document.from_file(path)).is_valid

    @property
    def mode(self) -> Mode:
        return self._inner.mode


def validate_on_save(
    mode: Mode = Mode.LENIENT,
    resources: ResourceAccess | None = None,
) -> Callable[[F], F]:
    """Decorator validating the XML file a function writes.

    The output path is taken from the last positional argument, or from an
    ``output_path``/``path``/``filename`` keyword argument.

    Example:
        @validate_on_save()
        def write_config(output_path: str) -> None:
            Path(output_path).write_text(render())
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            result = func(*args, **kwargs)

            output_path = None
            if args and isinstance(args[-1], (str, Path)):
                output_path = Path(args[-1])
            else:
                for key in ("output_path", "path", "filename"):
                    if key in kwargs:
                        output_path = Path(kwargs[key])
                        break

            if output_path and output_path.exists():
                validator = SchemaValidator(resources=resources, mode=mode)
                outcome = validator.validate(Document.from_file(output_path))
                if not outcome.is_valid:
                    raise DocumentValidationError(
                        f"Generated invalid XML: {outcome.summary()}", outcome.violations
                    )

            return result

        return wrapper  # type: ignore[return-value]

    return decorator


# pytest fixtures (import these in conftest.py)

def pytest_assert_valid_xml():
    """pytest fixture providing an assertion helper for XML validation.

    Usage in conftest.py:
        from xsd_audit.helpers import pytest_assert_valid_xml
        assert_valid_xml = pytest_assert_valid_xml()

    Usage in tests:
        def test_my_generator(assert_valid_xml, tmp_path):
            output = tmp_path / "beans.xml"
            generate(output)
            assert_valid_xml(output)
    """
    import pytest

    @pytest.fixture
    def assert_valid_xml() -> Callable[[Path | str], None]:
        """Fixture providing validation assertion helper."""
        validator = SchemaValidator()

        def _assert(path: Path | str) -> None:
            result = validator.validate(Document.from_file(path))
            if not result.is_valid:
                violations = "\n".join(f"  - {v}" for v in result.violations[:10])
                if result.violation_count > 10:
                    violations += f"\n  ... (+{result.violation_count - 10} more)"
                pytest.fail(f"XML validation failed:\n{violations}")

        return _assert

    return assert_valid_xml
