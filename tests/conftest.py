"""pytest configuration and fixtures for xsd_audit tests."""

from __future__ import annotations

import pytest

from xsd_audit import InMemoryResources, SchemaValidator
from tests.fixture_loader import (
    BEANS_XSD,
    CHANGES_XSD,
    DECORATION_XSD,
    UTIL_XSD,
    load_schema,
)


@pytest.fixture
def resources() -> InMemoryResources:
    """Resources with the published schemas reachable, nothing else."""
    return (
        InMemoryResources()
        .with_url(BEANS_XSD, load_schema("beans.xsd"))
        .with_url(UTIL_XSD, load_schema("util.xsd"))
        .with_url(CHANGES_XSD, load_schema("changes.xsd"))
        .with_url(DECORATION_XSD, load_schema("decoration.xsd"))
    )


@pytest.fixture
def project_resources(resources: InMemoryResources) -> InMemoryResources:
    """Published schemas plus project-local ones under src/main/resources."""
    return (
        resources
        .with_file("src/main/resources/project.xsd", load_schema("project.xsd"))
        .with_file("src/main/resources/common.xsd", load_schema("common.xsd"))
    )


@pytest.fixture
def validator(resources: InMemoryResources) -> SchemaValidator:
    """Provide a lenient validator over in-memory resources."""
    return SchemaValidator(resources=resources)


@pytest.fixture
def strict_validator(resources: InMemoryResources) -> SchemaValidator:
    """Provide a strict validator over in-memory resources."""
    return SchemaValidator(resources=resources, strict=True)
