"""OutputChecker helper for validating DFXML output structure."""

import xml.etree.ElementTree as ET
from typing import List

import pytest

from dfxml_writer.constants import XML_HEADER


class OutputChecker:
    """Helper class for validating emitted DFXML documents."""

    @classmethod
    def body(cls, content: str) -> str:
        """Return the document without its XML declaration line.

        Raises:
            AssertionError: If the declaration line is missing
        """
        if not content.startswith(XML_HEADER):
            raise AssertionError(f"Missing XML declaration. Content preview: {content[:200]}...")
        return content[len(XML_HEADER):]

    @classmethod
    def parse_fragment(cls, content: str) -> ET.Element:
        """Parse a document whose body may hold several top-level elements.

        The body is wrapped in a dummy root tag, so leaf writes outside any
        pushed element still parse.

        Args:
            content: Full writer output including the declaration line

        Returns:
            The dummy root element

        Raises:
            AssertionError: If the body is not well-formed
        """
        wrapped = f"<dummy_root>{cls.body(content)}</dummy_root>"
        try:
            return ET.fromstring(wrapped)
        except ET.ParseError as e:
            raise AssertionError(f"Output is not well-formed: {e}\nContent preview: {content[:500]}...")

    @classmethod
    def parse_document(cls, content: str) -> ET.Element:
        """Parse a complete document, DOCTYPE included.

        Raises:
            AssertionError: If the document is not well-formed
        """
        try:
            return ET.fromstring(content.encode("utf-8"))
        except ET.ParseError as e:
            raise AssertionError(f"Document is not well-formed: {e}\nContent preview: {content[:500]}...")

    @classmethod
    def element_declarations(cls, content: str) -> List[str]:
        """Element names declared by ``<!ELEMENT name ANY >`` lines."""
        names = []
        for line in content.splitlines():
            if line.startswith("<!ELEMENT "):
                names.append(line.split()[1])
        return names


@pytest.fixture
def validate_xml():
    """Fixture returning a function that asserts the body is well-formed."""
    def _validate(content: str) -> ET.Element:
        return OutputChecker.parse_fragment(content)
    return _validate


@pytest.fixture
def parse_document():
    """Fixture returning a function that parses a whole DFXML document."""
    def _parse(content: str) -> ET.Element:
        return OutputChecker.parse_document(content)
    return _parse
