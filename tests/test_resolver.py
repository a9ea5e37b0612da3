"""Tests for schema resolution."""

from __future__ import annotations

import pytest

from xsd_audit import (
    InMemoryResources,
    ResolutionKind,
    SchemaReference,
    SchemaResolver,
)

XSD = b'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"/>'


def tagged_schema(name: str) -> bytes:
    return f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema" id="{name}"/>'.encode()


def make_resolver(resource_root: str = "") -> SchemaResolver:
    resources = (
        InMemoryResources()
        .with_file("src/main/xml/near.xsd", XSD)
        .with_file("src/main/resources/shared.xsd", XSD)
        .with_file("schemas/abs.xsd", XSD)
        .with_url("https://example.test/remote.xsd", XSD)
    )
    return SchemaResolver(resources, resource_root=resource_root)


class TestSchemaResolver:
    """Tests for SchemaResolver."""

    def test_relative_to_document_directory(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference(None, "near.xsd"), "src/main/xml/doc.xml"
        )
        assert resolved.kind == ResolutionKind.LOCAL
        assert resolved.system_id == "/src/main/xml/near.xsd"
        assert resolved.content == XSD
        assert resolved.is_resolved

    def test_relative_with_parent_directory(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference(None, "../resources/shared.xsd"), "src/main/xml/doc.xml"
        )
        assert resolved.system_id == "/src/main/resources/shared.xsd"

    def test_falls_back_to_resource_root(self) -> None:
        reference = SchemaReference("urn:a", "shared.xsd")
        assert not make_resolver().resolve(reference, "src/main/xml/doc.xml").is_resolved

        resolved = make_resolver("src/main/resources").resolve(reference, "src/main/xml/doc.xml")
        assert resolved.kind == ResolutionKind.LOCAL
        assert resolved.namespace == "urn:a"

    def test_document_directory_wins(self) -> None:
        resolver = SchemaResolver(
            InMemoryResources()
            .with_file("docs/a.xsd", tagged_schema("near"))
            .with_file("root/a.xsd", tagged_schema("far")),
            resource_root="root",
        )
        resolved = resolver.resolve(SchemaReference(None, "a.xsd"), "docs/doc.xml")
        assert resolved.content == tagged_schema("near")

    def test_absolute_path(self) -> None:
        resolved = make_resolver().resolve(SchemaReference(None, "/schemas/abs.xsd"), "x/doc.xml")
        assert resolved.kind == ResolutionKind.LOCAL

    def test_file_uri(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference(None, "file:///schemas/abs.xsd"), "x/doc.xml"
        )
        assert resolved.kind == ResolutionKind.LOCAL
        assert resolved.system_id == "/schemas/abs.xsd"

    def test_remote(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference("urn:r", "https://example.test/remote.xsd"), "doc.xml"
        )
        assert resolved.kind == ResolutionKind.REMOTE
        assert resolved.system_id == "https://example.test/remote.xsd"

    def test_unreachable_remote_is_unresolved(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference("urn:r", "https://example.test/missing.xsd"), "doc.xml"
        )
        assert resolved.kind == ResolutionKind.UNRESOLVED
        assert resolved.content is None
        assert resolved.reason == "host unreachable"

    def test_missing_file_is_unresolved(self) -> None:
        resolved = make_resolver().resolve(SchemaReference(None, "nope.xsd"), "doc.xml")
        assert resolved.kind == ResolutionKind.UNRESOLVED
        assert resolved.reason == "file not found"

    def test_unsupported_scheme_is_unresolved(self) -> None:
        resolved = make_resolver().resolve(
            SchemaReference(None, "ftp://example.test/a.xsd"), "doc.xml"
        )
        assert resolved.kind == ResolutionKind.UNRESOLVED
        assert "ftp" in resolved.reason

    def test_resolve_all_keeps_order(self) -> None:
        references = [
            SchemaReference("urn:r", "https://example.test/remote.xsd"),
            SchemaReference(None, "nope.xsd"),
            SchemaReference(None, "near.xsd"),
        ]
        kinds = [
            r.kind for r in make_resolver().resolve_all(references, "src/main/xml/doc.xml")
        ]
        assert kinds == [
            ResolutionKind.REMOTE,
            ResolutionKind.UNRESOLVED,
            ResolutionKind.LOCAL,
        ]

    @pytest.mark.parametrize(
        "content",
        [
            b"<!doctype html><html><body>Search</body></html>",
            b"<html><body/></html>",
            b"",
        ],
    )
    def test_content_that_is_not_a_schema_is_unresolved(self, content: bytes) -> None:
        """A location answering with a web page did not yield a schema."""
        resolver = SchemaResolver(InMemoryResources().with_url("http://www.google.com", content))
        resolved = resolver.resolve(SchemaReference("urn:a", "http://www.google.com"), "doc.xml")
        assert resolved.kind == ResolutionKind.UNRESOLVED
        assert resolved.reason == "not an XML Schema document"

    def test_local_file_that_is_not_a_schema_is_unresolved(self) -> None:
        resolver = SchemaResolver(InMemoryResources().with_file("docs/a.xsd", b"<notes/>"))
        resolved = resolver.resolve(SchemaReference(None, "a.xsd"), "docs/doc.xml")
        assert not resolved.is_resolved
