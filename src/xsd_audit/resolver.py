"""Turning schema references into loadable schema content."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote, urlparse

from lxml import etree

from xsd_audit.errors import ResolutionError
from xsd_audit.namespaces import XSD
from xsd_audit.references import SchemaReference
from xsd_audit.resources import ResourceAccess

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = frozenset({"http", "https"})


class ResolutionKind(Enum):
    """Where a schema's content came from."""

    LOCAL = "local"
    REMOTE = "remote"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class ResolvedSchema:
    """A reference together with the content it points to.

    ``system_id`` is the absolute path or URL the content was loaded from
    and identifies the schema when bindings are merged. Unresolved entries
    carry no content and a ``reason`` instead.
    """

    reference: SchemaReference
    kind: ResolutionKind
    system_id: str = ""
    content: bytes | None = None
    reason: str = ""

    @property
    def namespace(self) -> str | None:
        return self.reference.namespace

    @property
    def is_resolved(self) -> bool:
        return self.kind is not ResolutionKind.UNRESOLVED


def is_remote(location: str) -> bool:
    return urlparse(location).scheme.lower() in REMOTE_SCHEMES


def file_uri_path(location: str) -> str | None:
    """Return the filesystem path of a ``file:`` URI, or None."""
    parsed = urlparse(location)
    if parsed.scheme.lower() != "file":
        return None
    return unquote(parsed.path)


def check_schema_document(location: str, content: bytes) -> bytes:
    """Return content if it is an XML Schema document.

    Anything else (an HTML error page, a redirect target, an empty body)
    means the location did not yield a schema at all.

    Raises:
        ResolutionError: if content is not well-formed or not an xs:schema.
    """
    parser = etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False)
    try:
        root = etree.fromstring(content, parser=parser)
    except etree.XMLSyntaxError:
        raise ResolutionError(location, "not an XML Schema document") from None
    if root.tag != f"{{{XSD}}}schema":
        raise ResolutionError(location, "not an XML Schema document")
    return content


class SchemaResolver:
    """Resolves references found in one document.

    Relative locations are tried against the document's own directory and
    then against ``resource_root`` (relative to the project); the first
    existing file wins. Absolute paths, ``file:`` and HTTP(S) URIs are
    loaded directly. Failures never raise: they come back as
    ``ResolutionKind.UNRESOLVED`` so the caller can apply its policy.
    """

    def __init__(self, resources: ResourceAccess, resource_root: str = ""):
        self._resources = resources
        self._resource_root = resource_root

    def resolve(self, reference: SchemaReference, document_path: str) -> ResolvedSchema:
        location = reference.location
        try:
            if is_remote(location):
                content = check_schema_document(location, self._resources.fetch(location))
                return ResolvedSchema(
                    reference, ResolutionKind.REMOTE, system_id=location, content=content
                )

            path = file_uri_path(location)
            scheme = urlparse(location).scheme
            if path is not None or posixpath.isabs(location):
                system_id = self._resources.local_path(path or location)
            elif len(scheme) > 1:
                # Single letters are Windows drive letters, not schemes.
                raise ResolutionError(location, f"unsupported URI scheme '{scheme}'")
            else:
                system_id = self._find_relative(location, document_path)
            if system_id is None:
                raise ResolutionError(location, "file not found")
            content = check_schema_document(location, self._resources.read(system_id))
            return ResolvedSchema(
                reference, ResolutionKind.LOCAL, system_id=system_id, content=content
            )
        except ResolutionError as exc:
            logger.warning("%s: cannot resolve schema %s (%s)", document_path, location, exc.reason)
            return ResolvedSchema(reference, ResolutionKind.UNRESOLVED, reason=exc.reason)

    def resolve_all(
        self, references: list[SchemaReference], document_path: str
    ) -> list[ResolvedSchema]:
        return [self.resolve(ref, document_path) for ref in references]

    def _find_relative(self, location: str, document_path: str) -> str | None:
        candidates = [
            posixpath.join(posixpath.dirname(document_path), location),
            posixpath.join(self._resource_root, location),
        ]
        for candidate in candidates:
            found = self._resources.local_path(posixpath.normpath(candidate))
            if found is not None:
                return found
        return None
