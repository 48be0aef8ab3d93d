"""Standardize the public API for the dfxml_writer package."""

from .constants import CONFIG_FILENAME, XML_HEADER
from .core import RecordSettings, TagRegistry, TagStack
from .environment import (
    add_build_environment,
    add_cpuid,
    add_dfxml_creator,
    add_execution_environment,
    add_rusage,
    build_environment,
    cpu_info,
    execution_environment,
    resource_usage,
)
from .escaping import escape_text, format_attributes, sanitize_tag_name, xml_map
from .exceptions import (
    ConfigurationError,
    DFXMLError,
    FormattingError,
    ProtocolMisuseError,
    SinkError,
)
from .sink import FileSink, OutputSink, StagedFileSink, StreamSink, render_dtd
from .timing import Timeval, TimeTracker, format_timeval, timeval_delta
from .utils import make_command_line, setup_logger
from .writer import DFXMLWriter

__version__ = "1.0.0"

__all__ = [
    "DFXMLWriter",
    "RecordSettings",
    "TagStack",
    "TagRegistry",
    "TimeTracker",
    "Timeval",
    "timeval_delta",
    "format_timeval",
    "OutputSink",
    "StreamSink",
    "FileSink",
    "StagedFileSink",
    "render_dtd",
    "escape_text",
    "sanitize_tag_name",
    "format_attributes",
    "xml_map",
    "DFXMLError",
    "ConfigurationError",
    "SinkError",
    "FormattingError",
    "ProtocolMisuseError",
    "add_dfxml_creator",
    "add_build_environment",
    "add_execution_environment",
    "add_cpuid",
    "add_rusage",
    "build_environment",
    "execution_environment",
    "cpu_info",
    "resource_usage",
    "make_command_line",
    "setup_logger",
    "CONFIG_FILENAME",
    "XML_HEADER",
]
