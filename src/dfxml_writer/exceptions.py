"""Error types raised by the DFXML writer."""


class DFXMLError(Exception):
    """Base class for every error raised while emitting a document."""


class ConfigurationError(DFXMLError, ValueError):
    """An element name cannot be represented (it contains a space)."""

    def __init__(self, tag: str):
        self.tag = tag
        super().__init__(f"tag '{tag}' contains space. Cannot continue.")


class SinkError(DFXMLError):
    """A destination or staging file could not be opened."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FormattingError(DFXMLError):
    """The formatting primitive failed to produce element text."""


class ProtocolMisuseError(DFXMLError, AssertionError):
    """The caller broke the push/pop protocol, e.g. popped with nothing open."""
