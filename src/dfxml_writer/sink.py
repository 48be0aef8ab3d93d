"""Output destinations for DFXML documents, including the staged DTD rewrite."""

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Callable, Iterable, Optional, TextIO, Union

from .constants import DEFAULT_DTD_ROOT, DTD_ATTLISTS, STAGING_SUFFIX
from .exceptions import SinkError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def render_dtd(names: Iterable[str], root: str = DEFAULT_DTD_ROOT) -> str:
    """Build the inline DTD block declaring every element name.

    Args:
        names: Distinct element names seen in the document body.
        root: Element named in the DOCTYPE declaration.

    Returns:
        The complete ``<!DOCTYPE ...]>`` block, newline terminated.
    """
    lines = [f"<!DOCTYPE {root}", "["]
    lines.extend(f"<!ELEMENT {name} ANY >" for name in names)
    lines.extend(DTD_ATTLISTS)
    lines.append("]>")
    return "\n".join(lines) + "\n"


def staging_template_for(path: PathLike) -> str:
    """Default staging template for a target file: ``<path>_tmp_XXXXXXXX``."""
    return f"{path}{STAGING_SUFFIX}"


def create_staging_file(template: str) -> str:
    """Create a unique, empty staging file from a template.

    A trailing run of ``X`` characters in the template is replaced by a
    unique suffix, in the manner of ``mkstemp(3)``.

    Args:
        template: Path template such as ``/tmp/xml_XXXXXXXX``.

    Returns:
        Path of the created file.

    Raises:
        SinkError: If the file cannot be created.
    """
    directory, base = os.path.split(template)
    prefix = base.rstrip("X")
    try:
        fd, name = tempfile.mkstemp(prefix=prefix, dir=directory or ".")
    except OSError as e:
        raise SinkError(template, f"{e.strerror}: Cannot create temporary file") from e
    os.close(fd)
    return name


class OutputSink:
    """A writable text destination owned by a single document."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.closed = False

    def write(self, text: str) -> None:
        self.stream.write(text)

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.stream.close()


class StreamSink(OutputSink):
    """Write to a caller-owned stream, by default the console."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream if stream is not None else sys.stdout)

    def close(self) -> None:
        # The stream belongs to the caller; only flush it.
        if self.closed:
            return
        self.closed = True
        self.stream.flush()


def _open_for_writing(path: PathLike) -> TextIO:
    try:
        return open(path, "w", encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise SinkError(str(path), e.strerror or str(e)) from e


class FileSink(OutputSink):
    """Write straight to a file."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        logger.debug(f"Opening output file: {self.path}")
        super().__init__(_open_for_writing(self.path))


class StagedFileSink(OutputSink):
    """Stream to a staging file and rewrite the target once on close.

    The element vocabulary is only known once the whole body has streamed, so
    the DTD is injected after the fact with one extra copy of the file.
    """

    def __init__(self, path: PathLike, tempfile_template: Optional[str] = None):
        self.path = Path(path)
        # Fail early if the target cannot be created at all.
        _open_for_writing(self.path).close()

        template = tempfile_template or staging_template_for(self.path)
        self.staging_path = Path(create_staging_file(template))
        logger.debug(f"Staging {self.path} through {self.staging_path}")
        super().__init__(_open_for_writing(self.staging_path))
        self.finalized = False

    def finalize(self, declare: Callable[[], str]) -> None:
        """Copy the staging file to the target with extra text after line one.

        Args:
            declare: Called once to produce the text injected after the first
                line, typically the DTD.

        Raises:
            SinkError: If the staging file cannot be reopened for reading or
                the target cannot be opened for writing.
        """
        if self.finalized:
            return
        OutputSink.close(self)

        try:
            staged = open(self.staging_path, "rb")
        except OSError as e:
            raise SinkError(str(self.staging_path), f"{e.strerror}: Cannot re-open for input") from e

        with staged:
            try:
                target = open(self.path, "wb")
            except OSError as e:
                raise SinkError(
                    str(self.path),
                    f"{e.strerror}: Cannot open for output; will not delete {self.staging_path}",
                ) from e
            with target:
                target.write(staged.readline())
                target.write(declare().encode("utf-8"))
                shutil.copyfileobj(staged, target)

        self.staging_path.unlink()
        self.finalized = True
        logger.debug(f"Finalized {self.path}; removed {self.staging_path}")
