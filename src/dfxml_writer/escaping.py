"""Text escaping and tag-name helpers for DFXML output."""

from typing import Dict, Mapping, Union
from xml.sax.saxutils import escape, unescape

from .constants import PERCENT_ENCODINGS, TAG_NAME_RESERVED, XML_ENTITIES

_ESCAPE_ENTITIES: Dict[str, str] = {**XML_ENTITIES, **PERCENT_ENCODINGS}

Attributes = Union[None, str, Mapping[str, object]]


def escape_text(text: str) -> str:
    """Make text safe for element content and quoted attribute values.

    Markup characters become named entities and NUL, CR, LF and TAB become
    percent-codes. Everything else, non-ASCII included, passes through.

    Args:
        text: Raw text to escape.

    Returns:
        The escaped string.
    """
    return escape(text, _ESCAPE_ENTITIES)


def sanitize_tag_name(text: str) -> str:
    """Derive a usable element name from arbitrary text.

    Args:
        text: Free-form text, e.g. a label read from a device.

    Returns:
        Lower-cased printable characters with whitespace mapped to underscores.
    """
    kept = []
    for ch in text:
        if ch.isprintable() and ch not in TAG_NAME_RESERVED:
            kept.append("_" if ch.isspace() else ch.lower())
    return "".join(kept)


def format_attributes(attributes: Attributes) -> str:
    """Render attributes for an opening tag.

    A string is taken as already formatted and used verbatim. A mapping is
    rendered as single-quoted ``name='value'`` pairs with escaped values.

    Args:
        attributes: None, a preformatted attribute string, or a mapping.

    Returns:
        Attribute text without a leading space, or an empty string.
    """
    if not attributes:
        return ""
    if isinstance(attributes, str):
        return attributes
    return " ".join(f"{name}='{escape_text(str(value))}'" for name, value in attributes.items())


def xml_map(mapping: Mapping[str, object], outer: str, attributes: Attributes = None) -> str:
    """Turn a mapping into a compact blob of XML.

    Args:
        mapping: Child element names and their values.
        outer: Name of the wrapping element.
        attributes: Attributes for the wrapping element.

    Returns:
        ``<outer attrs><key>value</key>...</outer>`` with keys in sorted order.
    """
    attrs = format_attributes(attributes)
    parts = [f"<{outer} {attrs}>" if attrs else f"<{outer}>"]
    for key in sorted(mapping):
        parts.append(f"<{key}>{escape_text(str(mapping[key]))}</{key}>")
    parts.append(f"</{outer}>")
    return "".join(parts)


def unescape_text(text: str) -> str:
    """Reverse :func:`escape_text`.

    Args:
        text: Output of :func:`escape_text`.

    Returns:
        The unescaped text.
    """
    return unescape(text, {code: ch for ch, code in _ESCAPE_ENTITIES.items()})
