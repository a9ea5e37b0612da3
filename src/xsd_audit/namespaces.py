"""XML Schema namespace definitions.

Based on W3C XML Schema Part 1, section 2.6.
"""

# Schema language namespace
XSD = "http://www.w3.org/2001/XMLSchema"

# Schema instance namespace (xsi:*)
XSI = "http://www.w3.org/2001/XMLSchema-instance"

# Instance attributes binding a document to its schemas
XSI_SCHEMA_LOCATION = f"{{{XSI}}}schemaLocation"
XSI_NO_NAMESPACE_SCHEMA_LOCATION = f"{{{XSI}}}noNamespaceSchemaLocation"


def local_name(tag: str) -> str:
    """Strip the namespace from a Clark-notation tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag
