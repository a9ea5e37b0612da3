"""Discovery of the schema bindings declared on a document's root element."""

from __future__ import annotations

from dataclasses import dataclass, field

from lxml import etree

from xsd_audit.errors import Violation, ViolationKind
from xsd_audit.namespaces import XSI_NO_NAMESPACE_SCHEMA_LOCATION, XSI_SCHEMA_LOCATION


@dataclass(frozen=True)
class SchemaReference:
    """A schema location, bound to a namespace or to no namespace."""

    namespace: str | None
    location: str

    @property
    def is_namespaced(self) -> bool:
        return self.namespace is not None

    def __str__(self) -> str:
        if self.namespace is None:
            return self.location
        return f"{self.namespace} -> {self.location}"


@dataclass
class ExtractedReferences:
    """References found on the root element, plus any malformed bindings."""

    references: list[SchemaReference] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.references)


def extract_references(root: etree._Element, line: int | None = None) -> ExtractedReferences:
    """Read xsi:schemaLocation and xsi:noNamespaceSchemaLocation from root.

    schemaLocation holds whitespace separated ``namespace location`` pairs.
    A dangling namespace without a location is reported as a configuration
    violation; the complete pairs before it are still returned. Violations
    are reported at ``line``, the opening line of the root element (its
    ``sourceline`` when not given).
    """
    extracted = ExtractedReferences()
    line = line or root.sourceline or 1

    pairs = root.get(XSI_SCHEMA_LOCATION)
    if pairs is not None:
        tokens = pairs.split()
        if len(tokens) % 2:
            extracted.violations.append(
                Violation(
                    line=line,
                    message=(
                        "xsi:schemaLocation must list namespace/location pairs, "
                        f"but '{tokens[-1]}' has no location"
                    ),
                    kind=ViolationKind.CONFIGURATION,
                )
            )
        for namespace, location in zip(tokens[::2], tokens[1::2]):
            extracted.references.append(SchemaReference(namespace, location))

    location = root.get(XSI_NO_NAMESPACE_SCHEMA_LOCATION)
    if location is not None:
        location = location.strip()
        if location:
            extracted.references.append(SchemaReference(None, location))
        else:
            extracted.violations.append(
                Violation(
                    line=line,
                    message="xsi:noNamespaceSchemaLocation is empty",
                    kind=ViolationKind.CONFIGURATION,
                )
            )

    return extracted
