"""Tests for the layout check."""

from __future__ import annotations

from xsd_audit import Document, ViolationKind
from xsd_audit.document import parse_document
from xsd_audit.formatting import check_formatting, pretty_text


def check(text: str):
    document = Document.from_text("a.xml", text)
    return check_formatting(document, parse_document(document))


class TestCheckFormatting:
    """Tests for check_formatting."""

    def test_pretty_document_passes(self) -> None:
        assert check("<root>\n    <child/>\n    <child>text</child>\n</root>\n") == []

    def test_declaration_is_kept(self) -> None:
        text = '<?xml version="1.0" encoding="UTF-8"?>\n<root>\n    <child/>\n</root>\n'
        assert check(text) == []

    def test_crlf_line_endings_pass(self) -> None:
        assert check("<root>\r\n    <child/>\r\n</root>\r\n") == []

    def test_single_line_document_fails_on_first_line(self) -> None:
        violations = check("<root><child/></root>")
        assert len(violations) == 1
        assert violations[0].kind == ViolationKind.FORMATTING
        assert violations[0].line == 1
        assert "<root>" in violations[0].message

    def test_wrong_indentation_reported_at_its_line(self) -> None:
        violations = check("<root>\n    <a>\n      <b/>\n    </a>\n</root>\n")
        assert [v.line for v in violations] == [3]

    def test_missing_final_newline(self) -> None:
        violations = check("<root>\n    <child/>\n</root>")
        assert len(violations) == 1
        assert "newline" in violations[0].message

    def test_pretty_text(self) -> None:
        document = Document.from_text("a.xml", "<r><a><b/></a></r>")
        assert pretty_text(document, parse_document(document)) == (
            "<r>\n    <a>\n        <b/>\n    </a>\n</r>\n"
        )

    def test_declared_encoding_is_respected(self) -> None:
        text = (
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            "<root>\n    <name>Renée</name>\n</root>\n"
        )
        document = Document("a.xml", text.encode("latin-1"))
        assert check_formatting(document, parse_document(document)) == []
