"""Main XSD validator - entry point for validation."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from lxml import etree

from xsd_audit.document import Document, parse_document, root_line
from xsd_audit.errors import (
    CompositionConflict,
    DocumentParseError,
    DocumentValidationError,
    Mode,
    UnresolvedPolicy,
    ValidationResult,
    Violation,
    ViolationKind,
)
from xsd_audit.formatting import check_formatting
from xsd_audit.namespaces import local_name
from xsd_audit.references import SchemaReference, extract_references
from xsd_audit.resolver import SchemaResolver
from xsd_audit.resources import ProjectResources, ResourceAccess
from xsd_audit.schema.composer import compile_context, compose
from xsd_audit.schema.validator import GrammarValidator

logger = logging.getLogger(__name__)


class SchemaValidator:
    """Validator for XML documents against the schemas they declare.

    Each call to ``validate`` parses the document, reads its
    xsi:schemaLocation and xsi:noNamespaceSchemaLocation bindings,
    resolves them, composes them into one grammar and validates the
    document against it. Nothing is carried over between calls, so one
    instance can be shared by many threads.

    Example:
        validator = SchemaValidator(strict=True)
        result = validator.validate(Document.from_file("pom.xml"))
        if not result.is_valid:
            for violation in result.violations:
                print(violation)
    """

    def __init__(
        self,
        resources: ResourceAccess | None = None,
        mode: Mode = Mode.LENIENT,
        on_unresolved: UnresolvedPolicy = UnresolvedPolicy.PASS,
        resource_root: str = "",
        check_formatting: bool = False,
        strict: bool | None = None,
    ):
        """Initialize the validator.

        Args:
            resources: Where schema content is loaded from. Defaults to
                       files under the current directory plus HTTP(S).
            mode: LENIENT passes documents without any schema binding,
                  STRICT fails them.
            on_unresolved: Outcome when none of the declared schemas can be
                           loaded.
            resource_root: Project directory searched for relative schema
                           locations after the document's own directory.
            check_formatting: Also require the document to be laid out as
                              its pretty-printed form.
            strict: Shorthand for ``mode=Mode.STRICT`` (or LENIENT if False).
        """
        if strict is not None:
            mode = Mode.STRICT if strict else Mode.LENIENT
        self._resources = resources if resources is not None else ProjectResources()
        self._mode = mode
        self._on_unresolved = on_unresolved
        self._check_formatting = check_formatting
        self._resolver = SchemaResolver(self._resources, resource_root)

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def strict(self) -> bool:
        return self._mode is Mode.STRICT

    @property
    def on_unresolved(self) -> UnresolvedPolicy:
        return self._on_unresolved

    def validate(self, document: Document) -> ValidationResult:
        """Validate one document.

        Args:
            document: The document to check.

        Returns:
            ValidationResult listing violations in the order found.

        Raises:
            DocumentParseError: If the document is not well-formed.
            CompositionConflict: If a namespace is bound to two schemas.
        """
        tree = parse_document(document)
        root = tree.getroot()
        line = root_line(document, tree)
        violations: list[Violation] = []

        if self._check_formatting:
            violations.extend(check_formatting(document, tree))

        extracted = extract_references(root, line)
        violations.extend(extracted.violations)
        violations.extend(
            self._validate_schemas(document, tree, extracted.references, line)
        )

        return ValidationResult(document=document.path, violations=violations)

    def is_valid(self, document: Document) -> bool:
        """Quick check if a document is valid."""
        return self.validate(document).is_valid

    def check(self, document: Document) -> None:
        """Validate and raise DocumentValidationError on failure."""
        result = self.validate(document)
        if not result.is_valid:
            raise DocumentValidationError(
                f"{document.path} is invalid: {result.summary()}", result.violations
            )

    def validate_many(
        self,
        documents: Iterable[Document],
        workers: int = 4,
        capture_errors: bool = False,
    ) -> list[ValidationResult]:
        """Validate documents in parallel, returning results in input order.

        Errors that abort a document (parse errors, conflicts) propagate
        from here just as they do from ``validate``, unless
        ``capture_errors`` is set: then each becomes a single PARSE or
        CONFLICT violation on that document's result and the others are
        still validated.
        """
        documents = list(documents)
        validate = self._validate_captured if capture_errors else self.validate
        if workers <= 1 or len(documents) <= 1:
            return [validate(document) for document in documents]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(validate, documents))

    def _validate_captured(self, document: Document) -> ValidationResult:
        try:
            return self.validate(document)
        except DocumentParseError as exc:
            violation = Violation(line=exc.line or 1, message=str(exc), kind=ViolationKind.PARSE)
        except CompositionConflict as exc:
            violation = Violation(line=1, message=str(exc), kind=ViolationKind.CONFLICT)
        return ValidationResult(document=document.path, violations=[violation])

    def _validate_schemas(
        self,
        document: Document,
        tree: etree._ElementTree,
        references: list[SchemaReference],
        line: int,
    ) -> list[Violation]:
        root = tree.getroot()

        if not references:
            if self._mode is Mode.STRICT:
                return [
                    Violation(
                        line=line,
                        message=(
                            f"no schema declared for <{local_name(root.tag)}>, "
                            "xsi:schemaLocation or xsi:noNamespaceSchemaLocation "
                            "is required"
                        ),
                        kind=ViolationKind.MISSING_SCHEMA,
                    )
                ]
            logger.debug("%s: no schema declared, skipping", document.path)
            return []

        context = compose(self._resolver.resolve_all(references, document.path))
        if context.is_empty:
            failures = [(s.reference.location, s.reason) for s in context.unresolved]
            return self._unresolved(document, failures, line)

        grammar = compile_context(context, self._resources, line)
        if grammar.unreachable:
            failures = [(url, "imported schema is unreachable") for url in grammar.missing]
            return self._unresolved(document, failures, line)
        if grammar.schema is None:
            return grammar.violations

        return GrammarValidator(grammar.schema).validate(tree, line)

    def _unresolved(
        self, document: Document, failures: list[tuple[str, str]], line: int
    ) -> list[Violation]:
        if self._on_unresolved is UnresolvedPolicy.PASS:
            logger.warning(
                "%s: none of the declared schemas could be loaded, not validated",
                document.path,
            )
            return []
        return [
            Violation(
                line=line,
                message=f"schema {location} cannot be loaded: {reason}",
                kind=ViolationKind.UNRESOLVED,
            )
            for location, reason in failures
        ]


def validate_xml(
    path: str | Path,
    strict: bool = False,
    resources: ResourceAccess | None = None,
) -> ValidationResult:
    """Convenience function to validate one XML file.

    Args:
        path: Path to the XML file.
        strict: Fail documents that declare no schema.
        resources: Where schemas are loaded from.

    Returns:
        ValidationResult with validation status and violations.
    """
    validator = SchemaValidator(resources=resources, strict=strict)
    return validator.validate(Document.from_file(path))


def is_valid_xml(path: str | Path, strict: bool = False) -> bool:
    """Convenience function to check if an XML file is valid."""
    return validate_xml(path, strict=strict).is_valid
