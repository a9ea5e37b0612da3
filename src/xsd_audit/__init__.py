"""XSD Audit - validate XML documents against the schemas they declare.

Reads xsi:schemaLocation and xsi:noNamespaceSchemaLocation from a
document, loads the referenced schemas from the project or the network,
composes them into one grammar and reports every violation with its line.

Example:
    from xsd_audit import Document, SchemaValidator, validate_xml

    # Quick check
    result = validate_xml("src/main/resources/beans.xml")
    if not result.is_valid:
        for violation in result.violations:
            print(violation)

    # With custom options
    from xsd_audit import InMemoryResources, Mode

    validator = SchemaValidator(
        resources=InMemoryResources().with_url(url, xsd_text),
        mode=Mode.STRICT,
    )
    result = validator.validate(Document.from_text("a.xml", xml_text))
"""

from xsd_audit.document import Document
from xsd_audit.errors import (
    CompositionConflict,
    DocumentParseError,
    DocumentValidationError,
    Mode,
    ResolutionError,
    UnresolvedPolicy,
    ValidationResult,
    Violation,
    ViolationKind,
    XsdAuditError,
)
from xsd_audit.references import SchemaReference, extract_references
from xsd_audit.resolver import ResolutionKind, ResolvedSchema, SchemaResolver
from xsd_audit.resources import (
    CachingResources,
    InMemoryResources,
    ProjectResources,
    ResourceAccess,
)
from xsd_audit.schema import NO_NAMESPACE, SchemaContext, compose
from xsd_audit.validator import SchemaValidator, is_valid_xml, validate_xml
from xsd_audit.helpers import validation_context, validate_on_save

__version__ = "0.1.0"

__all__ = [
    # Main API
    "SchemaValidator",
    "validate_xml",
    "is_valid_xml",
    "Document",
    # Results and errors
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "XsdAuditError",
    "DocumentParseError",
    "CompositionConflict",
    "ResolutionError",
    "DocumentValidationError",
    # Enums
    "Mode",
    "UnresolvedPolicy",
    "ResolutionKind",
    # Pipeline stages (for advanced usage)
    "SchemaReference",
    "extract_references",
    "ResolvedSchema",
    "SchemaResolver",
    "SchemaContext",
    "NO_NAMESPACE",
    "compose",
    # Resource access
    "ResourceAccess",
    "ProjectResources",
    "InMemoryResources",
    "CachingResources",
    # Integration helpers
    "validation_context",
    "validate_on_save",
]
