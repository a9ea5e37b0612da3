"""Schema validation of a parsed document against a compiled grammar."""

from __future__ import annotations

from lxml import etree

from xsd_audit.errors import Violation, ViolationKind


class GrammarValidator:
    """Checks a document against a composed XMLSchema.

    This validator reports:
    - Elements not allowed by the content model
    - Unknown or missing attributes
    - Values that do not conform to their simple types
    - Cardinality problems

    Every entry of the schema error log is kept, in document order, so a
    document with several problems reports all of them in one pass.
    """

    def __init__(self, schema: etree.XMLSchema):
        self._schema = schema

    def validate(
        self, tree: etree._ElementTree, line: int | None = None
    ) -> list[Violation]:
        """Validate a document tree.

        Args:
            tree: The parsed instance document.
            line: Reported for errors libxml2 gives no line for. Defaults
                  to the root element's sourceline.

        Returns:
            List of violations, empty if the document is valid.
        """
        if self._schema.validate(tree):
            return []

        fallback_line = line or tree.getroot().sourceline or 1
        return [
            Violation(
                line=entry.line or fallback_line,
                column=entry.column or None,
                message=entry.message,
                kind=ViolationKind.CONTENT,
            )
            for entry in self._schema.error_log
        ]
