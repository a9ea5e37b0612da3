"""XML documents handed to the validator."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from lxml import etree

from xsd_audit.errors import DocumentParseError
from xsd_audit.namespaces import local_name


@dataclass(frozen=True)
class Document:
    """Raw document content plus the path it is known by.

    The path is used in messages and as the base for relative schema
    locations, so it should be the document's real (or project-relative)
    location.
    """

    path: str
    content: bytes

    @classmethod
    def from_file(cls, path: str | Path) -> Document:
        """Load a document from disk."""
        path = Path(path)
        return cls(path=path.as_posix(), content=path.read_bytes())

    @classmethod
    def from_text(cls, path: str, text: str) -> Document:
        """Create a document from a string, encoded as UTF-8."""
        return cls(path=path, content=text.encode("utf-8"))

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def _instance_parser() -> etree.XMLParser:
    # Instance documents never pull anything from outside.
    return etree.XMLParser(
        load_dtd=False,
        no_network=True,
        resolve_entities=False,
        huge_tree=True,
    )


def parse_document(document: Document) -> etree._ElementTree:
    """Parse a document, raising DocumentParseError if it is not well-formed."""
    try:
        root = etree.fromstring(document.content, parser=_instance_parser())
    except etree.XMLSyntaxError as exc:
        raise DocumentParseError(document.path, exc.msg, exc.lineno) from exc
    return root.getroottree()


def document_text(document: Document, tree: etree._ElementTree) -> str:
    """The document's characters, decoded with the encoding the parser used."""
    encoding = (tree.docinfo.encoding or "utf-8").lower()
    if encoding in ("utf-8", "utf8"):
        encoding = "utf-8-sig"
    try:
        return document.content.decode(encoding, errors="replace")
    except LookupError:
        # libxml2 knows a few encodings Python has no codec for.
        return document.text


def root_line(document: Document, tree: etree._ElementTree) -> int:
    """Line on which the root element's start tag opens.

    libxml2 releases disagree on whether ``sourceline`` is the first or the
    last line of a start tag spread over several lines, so the tag is looked
    up in the text at or before the reported line.
    """
    root = tree.getroot()
    reported = root.sourceline or 1
    name = local_name(root.tag)
    if root.prefix:
        name = f"{root.prefix}:{name}"
    opening = re.compile(rf"<{re.escape(name)}(?=[\s/>]|$)")
    lines = document_text(document, tree).split("\n")[:reported]
    for number in range(len(lines), 0, -1):
        if opening.search(lines[number - 1]):
            return number
    return reported
