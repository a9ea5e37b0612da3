"""Tests for schema reference extraction."""

from __future__ import annotations

import pytest
from lxml import etree

from xsd_audit import SchemaReference, ViolationKind, extract_references

XSI = 'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"'


def root_of(xml: str) -> etree._Element:
    return etree.fromstring(xml.encode("utf-8"))


class TestExtractReferences:
    """Tests for extract_references."""

    def test_no_attributes(self) -> None:
        extracted = extract_references(root_of("<a/>"))
        assert not extracted
        assert extracted.references == []
        assert extracted.violations == []

    def test_namespaced_pairs_in_order(self) -> None:
        extracted = extract_references(
            root_of(f'<a {XSI} xsi:schemaLocation="urn:a a.xsd\n   urn:b  http://b/b.xsd"/>')
        )
        assert extracted.references == [
            SchemaReference("urn:a", "a.xsd"),
            SchemaReference("urn:b", "http://b/b.xsd"),
        ]
        assert all(ref.is_namespaced for ref in extracted.references)

    def test_no_namespace_location(self) -> None:
        extracted = extract_references(
            root_of(f'<a {XSI} xsi:noNamespaceSchemaLocation=" a.xsd "/>')
        )
        assert extracted.references == [SchemaReference(None, "a.xsd")]
        assert not extracted.references[0].is_namespaced

    def test_both_attributes(self) -> None:
        extracted = extract_references(
            root_of(
                f'<a {XSI} xsi:schemaLocation="urn:b b.xsd" '
                'xsi:noNamespaceSchemaLocation="a.xsd"/>'
            )
        )
        assert [ref.namespace for ref in extracted.references] == ["urn:b", None]

    def test_unprefixed_attribute_is_ignored(self) -> None:
        """Only attributes in the schema-instance namespace bind schemas."""
        extracted = extract_references(root_of('<a schemaLocation="urn:a a.xsd"/>'))
        assert not extracted

    @pytest.mark.parametrize("value", ["urn:a", "urn:a a.xsd urn:b"])
    def test_odd_token_count_is_reported(self, value: str) -> None:
        extracted = extract_references(root_of(f'<a {XSI} xsi:schemaLocation="{value}"/>'))
        assert len(extracted.violations) == 1
        violation = extracted.violations[0]
        assert violation.kind == ViolationKind.CONFIGURATION
        assert violation.line == 1
        assert "has no location" in violation.message
        assert len(extracted.references) == len(value.split()) // 2

    def test_violations_use_given_line(self) -> None:
        root = root_of(
            f'<a {XSI}\n   xsi:schemaLocation="urn:a"\n'
            '   xsi:noNamespaceSchemaLocation=""/>'
        )
        extracted = extract_references(root, line=1)
        assert [v.line for v in extracted.violations] == [1, 1]

    def test_empty_no_namespace_location_is_reported(self) -> None:
        extracted = extract_references(
            root_of(f'<a {XSI} xsi:noNamespaceSchemaLocation="  "/>')
        )
        assert not extracted
        assert extracted.violations[0].kind == ViolationKind.CONFIGURATION

    def test_reference_str(self) -> None:
        assert str(SchemaReference("urn:a", "a.xsd")) == "urn:a -> a.xsd"
        assert str(SchemaReference(None, "a.xsd")) == "a.xsd"
