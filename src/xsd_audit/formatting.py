"""Layout check: a document must look like its own pretty-printed form."""

from __future__ import annotations

import copy

from lxml import etree

from xsd_audit.document import Document, document_text
from xsd_audit.errors import Violation, ViolationKind

INDENT = "    "


def _declaration(text: str) -> str | None:
    if text.startswith("<?xml"):
        end = text.find("?>")
        if end != -1:
            return text[: end + 2]
    return None


def pretty_text(document: Document, tree: etree._ElementTree) -> str:
    """Render the document the way it is expected to be laid out."""
    pretty = copy.deepcopy(tree)
    etree.indent(pretty, space=INDENT)
    body = etree.tostring(pretty, encoding="unicode")
    declaration = _declaration(document_text(document, tree))
    if declaration is not None:
        body = f"{declaration}\n{body}"
    return body + "\n"


def check_formatting(document: Document, tree: etree._ElementTree) -> list[Violation]:
    """Report the first line where the document departs from its pretty form."""
    actual = document_text(document, tree)
    expected = pretty_text(document, tree)
    if actual == expected:
        return []

    actual_lines = actual.splitlines()
    expected_lines = expected.splitlines()
    for number, (got, want) in enumerate(zip(actual_lines, expected_lines), start=1):
        if got.rstrip("\r") != want:
            return [
                Violation(
                    line=number,
                    message=f"badly formatted line, expected '{want.strip()}'",
                    kind=ViolationKind.FORMATTING,
                )
            ]

    if len(actual_lines) != len(expected_lines):
        line = min(len(actual_lines), len(expected_lines)) or 1
        return [
            Violation(
                line=line,
                message=(
                    f"document has {len(actual_lines)} lines, "
                    f"expected {len(expected_lines)} when formatted"
                ),
                kind=ViolationKind.FORMATTING,
            )
        ]

    if not actual.endswith("\n"):
        return [
            Violation(
                line=len(actual_lines) or 1,
                message="missing newline at end of file",
                kind=ViolationKind.FORMATTING,
            )
        ]
    return []
