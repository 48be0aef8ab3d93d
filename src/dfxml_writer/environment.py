"""Fact producers describing the program, build and host of a DFXML run.

The functions here only collect plain key/value facts. The ``add_*``
helpers hand those facts to a :class:`~dfxml_writer.writer.DFXMLWriter`
through its public write operations.
"""

import getpass
import os
import platform
import sys
import time
from datetime import datetime
from importlib import metadata
from typing import Dict, List, Optional, Sequence

from .constants import START_TIME_FORMAT
from .timing import Timeval
from .utils import make_command_line
from .writer import DFXMLWriter

# Distributions whose versions are reported in the build environment
REPORTED_LIBRARIES = ["dfxml-writer", "python-dotenv"]

RUSAGE_COUNTERS = ["maxrss", "minflt", "majflt", "nswap", "inblock", "oublock"]


def build_environment() -> Dict[str, str]:
    """Describe the interpreter the writer runs on."""
    facts = {
        "compiler": f"{platform.python_implementation()} {platform.python_version()} "
                    f"({platform.python_compiler()})",
    }
    build_date = platform.python_build()[1]
    try:
        built = datetime.strptime(" ".join(build_date.split()), "%b %d %Y %H:%M:%S")
        facts["compilation_date"] = built.strftime("%Y-%m-%dT%H:%M:%S")
    except ValueError:
        pass
    return facts


def library_versions(names: Sequence[str] = REPORTED_LIBRARIES) -> Dict[str, str]:
    """Installed versions of the given distributions, skipping missing ones."""
    versions = {}
    for name in names:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            continue
    return versions


def execution_environment(command_line: str) -> Dict[str, str]:
    """Describe the host, user and start time of the current process.

    Args:
        command_line: Command line reported for the run.

    Returns:
        Ordered facts keyed by their DFXML element names.
    """
    uname = platform.uname()
    facts = {
        "os_sysname": uname.system,
        "os_release": uname.release,
        "os_version": uname.version,
        "host": uname.node,
        "arch": uname.machine,
        "command_line": command_line,
    }
    if hasattr(os, "getuid"):
        facts["uid"] = str(os.getuid())
    try:
        facts["username"] = getpass.getuser()
    except (KeyError, OSError):
        pass
    facts["start_time"] = time.strftime(START_TIME_FORMAT, time.gmtime())
    return facts


def cpu_info() -> Dict[str, str]:
    """Identify the processor as far as the platform module can tell."""
    facts = {"identification": platform.processor() or platform.machine()}
    count = os.cpu_count()
    if count:
        facts["nproc"] = str(count)
    return facts


def resource_usage(children: bool = False) -> Dict[str, str]:
    """Resource usage of this process, or of its waited-for children.

    Returns an empty mapping where getrusage is unavailable.
    """
    if sys.platform == "win32":
        return {}
    import resource

    who = resource.RUSAGE_CHILDREN if children else resource.RUSAGE_SELF
    usage = resource.getrusage(who)
    facts = {
        "utime": str(Timeval.from_seconds(usage.ru_utime)),
        "stime": str(Timeval.from_seconds(usage.ru_stime)),
    }
    for counter in RUSAGE_COUNTERS:
        facts[counter] = str(getattr(usage, f"ru_{counter}"))
    return facts


def write_facts(writer: DFXMLWriter, facts: Dict[str, str]) -> None:
    for tag, value in facts.items():
        writer.write_element(tag, value)


def add_build_environment(writer: DFXMLWriter) -> None:
    """Write the ``build_environment`` block."""
    with writer.element("build_environment"):
        write_facts(writer, build_environment())
        for name, version in library_versions().items():
            writer.write_element("library", attributes={"name": name, "version": version})


def add_cpuid(writer: DFXMLWriter) -> None:
    """Write the ``cpuid`` block."""
    with writer.element("cpuid"):
        write_facts(writer, cpu_info())


def add_execution_environment(writer: DFXMLWriter, command_line: str) -> None:
    """Write the ``execution_environment`` block."""
    with writer.element("execution_environment"):
        add_cpuid(writer)
        write_facts(writer, execution_environment(command_line))


def add_dfxml_creator(
    writer: DFXMLWriter,
    program: str,
    version: str,
    commit: str = "",
    argv: Optional[List[str]] = None,
) -> None:
    """Write the ``creator`` block identifying the program that made the file.

    Args:
        writer: Open document.
        program: Program name.
        version: Program version.
        commit: Source revision, omitted when empty.
        argv: Command line to report; defaults to sys.argv.
    """
    command_line = make_command_line(sys.argv if argv is None else argv)
    with writer.element("creator", "version='1.0'"):
        writer.write_element("program", program)
        writer.write_element("version", version)
        if commit:
            writer.write_element("commit", commit)
        add_build_environment(writer)
        add_execution_environment(writer, command_line)


def add_rusage(writer: DFXMLWriter, children: bool = False) -> None:
    """Write the ``rusage`` block with the wall-clock time since the document began."""
    facts = resource_usage(children)
    if not facts:
        return
    with writer.element("rusage"):
        write_facts(writer, facts)
        writer.write_element("clocktime", writer.elapsed())
