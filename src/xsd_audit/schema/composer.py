"""Combining every schema bound to a document into one grammar.

A document may draw on several vocabularies, so the schemas are not
checked one at a time. Instead a small driver schema is generated that
imports each namespace from its resolved location (and includes the
no-namespace schema, if any), and lxml compiles that driver into a single
XMLSchema. The driver and the resolved schemas are served from memory;
anything the schemas import on their own goes through the same resource
capability the resolver used.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field

from lxml import etree

from xsd_audit.errors import CompositionConflict, ResolutionError, Violation, ViolationKind
from xsd_audit.namespaces import XSD
from xsd_audit.resolver import (
    ResolvedSchema,
    check_schema_document,
    file_uri_path,
    is_remote,
)
from xsd_audit.resources import ResourceAccess

logger = logging.getLogger(__name__)

# Key used for the schema bound through xsi:noNamespaceSchemaLocation.
NO_NAMESPACE = "##none"


def namespace_key(namespace: str | None) -> str:
    return NO_NAMESPACE if namespace is None else namespace


@dataclass
class SchemaContext:
    """Resolved schemas of one document, keyed by namespace."""

    schemas: dict[str, ResolvedSchema] = field(default_factory=dict)
    unresolved: list[ResolvedSchema] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.schemas

    def __len__(self) -> int:
        return len(self.schemas)

    def driver_schema(self) -> bytes:
        """Serialize the schema that pulls every binding into one grammar."""
        root = etree.Element(f"{{{XSD}}}schema", nsmap={"xs": XSD})
        for key, schema in self.schemas.items():
            if key == NO_NAMESPACE:
                etree.SubElement(root, f"{{{XSD}}}include", schemaLocation=schema.system_id)
            else:
                etree.SubElement(
                    root,
                    f"{{{XSD}}}import",
                    namespace=key,
                    schemaLocation=schema.system_id,
                )
        return etree.tostring(root)


def compose(resolved: list[ResolvedSchema]) -> SchemaContext:
    """Group resolved schemas by namespace.

    Unresolved entries are set aside and never take part in conflict
    detection: a location that could not be loaded has no content to
    disagree with.

    Raises:
        CompositionConflict: if one namespace is bound to two different
            loaded schemas.
    """
    context = SchemaContext()
    for schema in resolved:
        if not schema.is_resolved:
            if schema not in context.unresolved:
                context.unresolved.append(schema)
            continue
        key = namespace_key(schema.namespace)
        previous = context.schemas.get(key)
        if previous is None:
            context.schemas[key] = schema
        elif previous.system_id != schema.system_id:
            raise CompositionConflict(schema.namespace, previous.system_id, schema.system_id)
    return context


class _ContextResolver(etree.Resolver):
    """Serves the composed schemas, loading nested imports on demand."""

    def __init__(self, context: SchemaContext, resources: ResourceAccess):
        super().__init__()
        self._served = {s.system_id: s.content for s in context.schemas.values()}
        self._resources = resources
        self.missing: list[str] = []

    def resolve(self, url, pubid, context):
        if not url:
            return None
        content = self._served.get(url)
        if content is None:
            content = self._load(url)
            if content is None:
                # Keeps libxml2 from trying the location itself.
                return self.resolve_empty(context)
            self._served[url] = content
        return self.resolve_string(content, context, base_url=url)

    def _load(self, url: str) -> bytes | None:
        try:
            if is_remote(url):
                return check_schema_document(url, self._resources.fetch(url))
            path = file_uri_path(url) or url
            if not posixpath.isabs(path):
                found = self._resources.local_path(path)
                if found is None:
                    raise ResolutionError(url, "file not found")
                path = found
            return check_schema_document(url, self._resources.read(path))
        except ResolutionError as exc:
            logger.warning("Cannot load nested schema %s (%s)", url, exc.reason)
            self.missing.append(url)
            return None


@dataclass
class CompiledGrammar:
    """Outcome of compiling a SchemaContext."""

    schema: etree.XMLSchema | None = None
    violations: list[Violation] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)

    @property
    def unreachable(self) -> bool:
        """Compilation failed only because something could not be fetched."""
        return self.schema is None and bool(self.missing)


def compile_context(
    context: SchemaContext, resources: ResourceAccess, line: int = 1
) -> CompiledGrammar:
    """Compile the composed schemas into one lxml XMLSchema.

    Schema errors are returned as violations reported at ``line`` (the
    root element of the document being validated).
    """
    resolver = _ContextResolver(context, resources)
    parser = etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False)
    parser.resolvers.add(resolver)

    driver = etree.fromstring(context.driver_schema(), parser=parser)
    try:
        schema = etree.XMLSchema(driver)
    except etree.XMLSchemaParseError as exc:
        messages = [entry.message for entry in exc.error_log] or [str(exc)]
        locations = ", ".join(s.system_id for s in context.schemas.values())
        return CompiledGrammar(
            violations=[
                Violation(
                    line=line,
                    message=f"schema {locations} cannot be used: {message}",
                    kind=ViolationKind.SCHEMA,
                )
                for message in messages
            ],
            missing=resolver.missing,
        )
    return CompiledGrammar(schema=schema, missing=resolver.missing)
