"""Output writer for DFXML documents."""

import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO, Union

from .constants import DEFAULT_DTD_ROOT, XML_HEADER
from .core import TagRegistry, TagStack
from .escaping import Attributes, escape_text, format_attributes
from .exceptions import FormattingError, ProtocolMisuseError
from .sink import FileSink, OutputSink, StagedFileSink, StreamSink, render_dtd
from .timing import Timeval, TimeTracker, format_timeval

logger = logging.getLogger(__name__)


class DFXMLWriter:
    """Write a nested DFXML document to a stream or file.

    Every operation that touches the output, structural ones included, runs
    under a single re-entrant lock, so calls from several threads are
    serialized at whole-call granularity. Nesting across threads is still the
    caller's business: a push on one thread and a leaf write on another land
    in whatever order the lock grants them.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        *,
        sink: Optional[OutputSink] = None,
        dtd_root: str = DEFAULT_DTD_ROOT,
        clock: Callable[[], Timeval] = Timeval.now,
    ):
        """Initialize the writer and emit the XML declaration.

        Args:
            stream: Stream to write to when no sink is given; defaults to stdout.
            sink: Explicit output sink, e.g. one built by :meth:`open`.
            dtd_root: Root element named in the DOCTYPE of a generated DTD.
            clock: Wall-clock source, replaceable in tests.
        """
        self.sink = sink if sink is not None else StreamSink(stream)
        self.dtd_root = dtd_root
        self.tag_stack = TagStack()
        self.tags = TagRegistry()
        self.timer = TimeTracker(clock)
        self.one_line = False
        self.total_chars = 0
        self._lock = threading.RLock()
        self._write(XML_HEADER)

    @classmethod
    def open(
        cls,
        path: Union[str, Path],
        make_dtd: bool = False,
        tempfile_template: Optional[str] = None,
        dtd_root: str = DEFAULT_DTD_ROOT,
        clock: Callable[[], Timeval] = Timeval.now,
    ) -> "DFXMLWriter":
        """Open a document on a file.

        Args:
            path: Target file.
            make_dtd: Stage the body and inject a DTD when the writer is closed.
            tempfile_template: Staging file template; trailing X's are
                replaced by a unique suffix. Defaults to ``<path>_tmp_XXXXXXXX``.
            dtd_root: Root element named in the DOCTYPE.
            clock: Wall-clock source, replaceable in tests.

        Returns:
            A DFXMLWriter owning the file.

        Raises:
            SinkError: If the target or staging file cannot be created.
        """
        if make_dtd:
            sink: OutputSink = StagedFileSink(path, tempfile_template)
        else:
            sink = FileSink(path)
        return cls(sink=sink, dtd_root=dtd_root, clock=clock)

    def __enter__(self) -> "DFXMLWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def make_dtd(self) -> bool:
        return isinstance(self.sink, StagedFileSink)

    @property
    def closed(self) -> bool:
        return self.sink.closed

    @property
    def depth(self) -> int:
        return self.tag_stack.depth

    def _write(self, text: str) -> None:
        if self.sink.closed:
            raise ProtocolMisuseError("write to a closed DFXML document")
        self.sink.write(text)
        self.total_chars += len(text)

    def _spaces(self) -> str:
        return self.tag_stack.indentation(self.one_line)

    @staticmethod
    def _open_tag(tag: str, attributes: Attributes = None, empty: bool = False) -> str:
        attrs = format_attributes(attributes)
        if empty:
            return f"<{tag} {attrs}/>" if attrs else f"<{tag} />"
        return f"<{tag} {attrs}>" if attrs else f"<{tag}>"

    # --- Structure ---

    def push_element(self, tag: str, attributes: Attributes = None) -> None:
        """Open a nested element.

        Args:
            tag: Element name; must not contain a space.
            attributes: Preformatted attribute text or a mapping.

        Raises:
            ConfigurationError: If the tag contains a space. Nothing is written.
        """
        with self._lock:
            name = self.tags.verify(tag)
            text = self._spaces() + self._open_tag(name, attributes)
            if not self.one_line:
                text += "\n"
            self._write(text)
            self.tags.register(name)
            self.tag_stack.push(name)

    def pop_element(self) -> str:
        """Close the innermost open element.

        Returns:
            Name of the element that was closed.

        Raises:
            ProtocolMisuseError: If no element is open.
        """
        with self._lock:
            name = self.tag_stack.pop()
            self._write(f"{self._spaces()}</{name}>\n")
            return name

    @contextmanager
    def element(self, tag: str, attributes: Attributes = None) -> Iterator["DFXMLWriter"]:
        """Push an element for the duration of a ``with`` block."""
        self.push_element(tag, attributes)
        try:
            yield self
        finally:
            self.pop_element()

    def set_one_line(self, one_line: bool) -> None:
        """Switch compact one-line mode on or off.

        Turning it on writes the current indentation once; turning it off
        ends the line.
        """
        with self._lock:
            if one_line:
                self._write(self._spaces())
            else:
                self._write("\n")
            self.one_line = one_line

    # --- Leaf writers ---

    def write_element(
        self,
        tag: str,
        value: object = "",
        attributes: Attributes = None,
        escape: bool = True,
    ) -> None:
        """Write a complete element with its content on one line.

        An empty value produces a self-closing element. An empty tag writes
        only the value.

        Args:
            tag: Element name.
            value: Element content; non-strings are converted with str().
            attributes: Preformatted attribute text or a mapping.
            escape: Whether to escape the value.
        """
        text = "" if value is None else str(value)
        with self._lock:
            name = self.tags.verify(tag) if tag else ""
            parts = [self._spaces()]
            if not text:
                if name:
                    parts.append(self._open_tag(name, attributes, empty=True))
            else:
                if name:
                    parts.append(self._open_tag(name, attributes))
                parts.append(escape_text(text) if escape else text)
                if name:
                    parts.append(f"</{name}>")
            parts.append("\n")
            self._write("".join(parts))
            if name:
                self.tags.register(name)
            self.sink.flush()

    def write_formatted(self, tag: str, attributes: Attributes, fmt: str, *args: object) -> None:
        """Write an element whose content is ``fmt % args``, unescaped.

        The caller is responsible for producing markup-safe text.

        Raises:
            FormattingError: If the format cannot be applied. Nothing is written.
        """
        body = self._format(fmt, args)
        with self._lock:
            name = self.tags.verify(tag)
            self._write(f"{self._spaces()}{self._open_tag(name, attributes)}{body}</{name}>\n")
            self.tags.register(name)
            self.sink.flush()

    def write_comment(self, text: str) -> None:
        """Write an XML comment verbatim."""
        with self._lock:
            self._write(f"<!-- {text} -->\n")
            self.sink.flush()

    def mark_timestamp(self, name: str) -> None:
        """Write a ``timestamp`` element with delta and total elapsed time.

        Args:
            name: Label for this point in the run.
        """
        with self._lock:
            delta, total = self.timer.mark()
            self.write_element(
                "timestamp",
                attributes={
                    "name": name,
                    "delta": format_timeval(delta),
                    "total": format_timeval(total),
                },
            )

    def elapsed(self) -> Timeval:
        """Time since the document was created."""
        with self._lock:
            return self.timer.elapsed()

    # --- Raw output ---

    def write_raw(self, text: str) -> None:
        """Write text verbatim."""
        with self._lock:
            self._write(text)

    def printf(self, fmt: str, *args: object) -> None:
        """Write ``fmt % args`` verbatim.

        Raises:
            FormattingError: If the format cannot be applied.
        """
        body = self._format(fmt, args)
        with self._lock:
            self._write(body)

    @staticmethod
    def _format(fmt: str, args: tuple) -> str:
        try:
            return fmt % args
        except (TypeError, ValueError, KeyError) as e:
            raise FormattingError(f"DFXMLWriter.write_formatted: {e}") from e

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the document, injecting the DTD when one was requested.

        Calling close again after it succeeded has no further effect. A DTD
        rewrite that failed is attempted again.

        Raises:
            SinkError: If the DTD rewrite cannot reopen the staging or target file.
        """
        with self._lock:
            if isinstance(self.sink, StagedFileSink):
                if self.sink.finalized:
                    return
            elif self.sink.closed:
                return
            if self.tag_stack.depth:
                logger.warning(f"Closing document with {self.tag_stack.depth} open element(s)")
            if isinstance(self.sink, StagedFileSink):
                self.sink.finalize(lambda: render_dtd(self.tags.names(), self.dtd_root))
            else:
                self.sink.close()
