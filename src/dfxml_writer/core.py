"""Element nesting state, tag vocabulary and recorder settings."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Set

from .constants import DEFAULT_DTD_ROOT, INDENT
from .exceptions import ConfigurationError, ProtocolMisuseError


@dataclass
class RecordSettings:
    """Container for recorder execution parameters.

    Attributes:
        output_file: Destination of the DFXML document, None for stdout.
        make_dtd: Whether to inject a DTD when the document is closed.
        tempfile_template: Staging file template used when make_dtd is set.
        dtd_root: Root element named in the DOCTYPE declaration.
        program: Program name reported in the creator block.
        program_version: Program version reported in the creator block.
        commit: Optional source revision reported in the creator block.
        command: Command line to run and record, may be empty.
        verbose: Whether to show detailed processing logs.
    """
    output_file: Optional[Path] = None
    make_dtd: bool = False
    tempfile_template: Optional[str] = None
    dtd_root: str = DEFAULT_DTD_ROOT
    program: str = "dfxml-record"
    program_version: str = ""
    commit: str = ""
    command: List[str] = field(default_factory=list)
    verbose: bool = False

    @classmethod
    def from_arguments(cls, args: Any, config: Dict[str, Any]) -> "RecordSettings":
        """Factory to create settings from CLI args and config.

        Command-line flags win over the configuration file.

        Args:
            args: Parsed CLI arguments from argparse.
            config: Loaded configuration dictionary.

        Returns:
            RecordSettings instance with all parameters resolved.
        """
        command = list(args.command or [])
        if command and command[0] == "--":
            command = command[1:]

        return cls(
            output_file=Path(args.output_file) if args.output_file else None,
            make_dtd=args.dtd or bool(config.get("make_dtd", False)),
            tempfile_template=args.tempfile_template or config.get("tempfile_template"),
            dtd_root=config.get("dtd_root") or DEFAULT_DTD_ROOT,
            program=args.program,
            program_version=args.program_version,
            commit=args.commit,
            command=command,
            verbose=args.verbose or bool(config.get("verbose", False)),
        )


class TagStack:
    """Track the currently open elements of a document."""

    def __init__(self) -> None:
        self._names: List[str] = []

    def __len__(self) -> int:
        return len(self._names)

    @property
    def depth(self) -> int:
        """Number of open, unclosed elements."""
        return len(self._names)

    def push(self, name: str) -> None:
        self._names.append(name)

    def pop(self) -> str:
        """Remove and return the innermost open element.

        Raises:
            ProtocolMisuseError: If no element is open.
        """
        if not self._names:
            raise ProtocolMisuseError("pop called with no open element")
        return self._names.pop()

    def top(self) -> Optional[str]:
        return self._names[-1] if self._names else None

    def indentation(self, one_line: bool = False) -> str:
        """Return the indentation for the current depth.

        Args:
            one_line: Whether one-line mode is active, which suppresses indentation.

        Returns:
            Two spaces per open element, or an empty string.
        """
        if one_line:
            return ""
        return INDENT * len(self._names)


class TagRegistry:
    """Accumulate every distinct element name emitted in a document."""

    def __init__(self) -> None:
        self._names: Set[str] = set()

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    @staticmethod
    def verify(tag: str) -> str:
        """Check that a tag can be emitted and return its bare name.

        Args:
            tag: Element name, optionally with the leading slash of a closer.

        Returns:
            The name without the leading slash.

        Raises:
            ConfigurationError: If the name contains a space.
        """
        if tag.startswith("/"):
            tag = tag[1:]
        if " " in tag:
            raise ConfigurationError(tag)
        return tag

    def register(self, tag: str) -> str:
        """Verify a tag and add it to the vocabulary."""
        name = self.verify(tag)
        self._names.add(name)
        return name

    def names(self) -> List[str]:
        """Registered names in sorted order."""
        return sorted(self._names)
