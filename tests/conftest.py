"""Shared pytest fixtures for DFXML writer tests."""

from fixtures.config_fixtures import isolated_environ, project_dir  # noqa: F401
from fixtures.output_checker import parse_document, validate_xml  # noqa: F401
from fixtures.writer_fixtures import fake_clock, string_writer  # noqa: F401
