"""Schema composition and grammar validation."""

from xsd_audit.schema.composer import (
    NO_NAMESPACE,
    CompiledGrammar,
    SchemaContext,
    compile_context,
    compose,
)
from xsd_audit.schema.validator import GrammarValidator

__all__ = [
    "NO_NAMESPACE",
    "CompiledGrammar",
    "GrammarValidator",
    "SchemaContext",
    "compile_context",
    "compose",
]
