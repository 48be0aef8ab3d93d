"""Entry point for ``dfxml-record``."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .cli import parse_arguments
from .config import load_config
from .core import RecordSettings
from .environment import add_dfxml_creator, add_rusage
from .exceptions import DFXMLError, SinkError
from .utils import make_command_line, run_command, setup_logger
from .writer import DFXMLWriter

# Exit status when the recorded command could not be started
EXIT_NOT_STARTED = 127


def open_writer(settings: RecordSettings, logger: logging.Logger) -> DFXMLWriter:
    """Open the output document described by the settings."""
    if settings.output_file is None:
        if settings.make_dtd:
            logger.warning("DTD generation needs an output file; writing to stdout without one")
        # Child output may carry undecodable bytes as surrogate escapes
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(errors="surrogateescape")
        return DFXMLWriter(dtd_root=settings.dtd_root)

    out_dir = settings.output_file.parent
    if not out_dir.exists():
        try:
            out_dir.mkdir(parents=True)
        except OSError as e:
            raise SinkError(str(out_dir), e.strerror or str(e)) from e
    return DFXMLWriter.open(
        settings.output_file,
        make_dtd=settings.make_dtd,
        tempfile_template=settings.tempfile_template,
        dtd_root=settings.dtd_root,
    )


def record_command(writer: DFXMLWriter, command: List[str], logger: logging.Logger) -> int:
    """Run a command and write its outcome as a ``command`` element.

    Returns:
        The command's exit code, or EXIT_NOT_STARTED if it never ran.
    """
    with writer.element("command"):
        writer.write_element("command_line", make_command_line(command))
        writer.mark_timestamp("start")
        logger.info(f"Running: {make_command_line(command)}")
        result = run_command(command)
        writer.mark_timestamp("end")

        if not result.success:
            logger.warning(f"Command failed to start: {result.error}")
            writer.write_element("error", result.error)
            return EXIT_NOT_STARTED

        writer.write_element("exit_code", result.exit_code)
        writer.write_element("stdout", result.stdout)
        writer.write_element("stderr", result.stderr)
        add_rusage(writer, children=True)

    if result.exit_code != 0:
        logger.warning(f"Command exited with code {result.exit_code}")
    return result.exit_code


def run_record(settings: RecordSettings, argv: List[str], logger: logging.Logger) -> int:
    """Write the complete DFXML document for one recorder invocation."""
    exit_code = 0
    with open_writer(settings, logger) as writer:
        with writer.element("dfxml", {"version": "1.0"}):
            add_dfxml_creator(
                writer,
                settings.program,
                settings.program_version,
                settings.commit,
                argv=argv,
            )
            if settings.command:
                exit_code = record_command(writer, settings.command, logger)
            add_rusage(writer)

    if settings.output_file is not None:
        logger.info(f"Wrote {settings.output_file} ({len(writer.tags)} distinct elements)")
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, record the run and return the exit status."""
    argv = sys.argv[1:] if argv is None else argv
    args = parse_arguments(argv)
    config = load_config(Path.cwd())
    settings = RecordSettings.from_arguments(args, config)
    logger = setup_logger("dfxml_writer", verbose=settings.verbose)

    try:
        return run_record(settings, ["dfxml-record", *argv], logger)
    except DFXMLError as e:
        logger.error(f"Error while writing DFXML: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
