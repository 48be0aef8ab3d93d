"""Integration tests for the dfxml-record entry point."""

import json
import sys

import pytest

from dfxml_writer import __version__
from dfxml_writer.cli import get_parser, parse_arguments
from dfxml_writer.constants import XML_HEADER
from dfxml_writer.main import EXIT_NOT_STARTED, main


@pytest.fixture
def workdir(tmp_path, monkeypatch, isolated_environ):
    """Run the recorder from an empty directory with a clean environment."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_parser_defaults():
    args = get_parser().parse_args([])
    assert args.output_file is None
    assert args.dtd is False
    assert args.program == "dfxml-record"
    assert args.program_version == __version__
    assert args.command == []


def test_parser_collects_command():
    args = parse_arguments(["-o", "out.xml", "--dtd", "--", "ls", "-l"])
    assert args.output_file == "out.xml"
    assert args.dtd is True
    assert args.command[-2:] == ["ls", "-l"]


def test_record_without_command(workdir, parse_document):
    out = workdir / "run.xml"
    assert main(["-o", str(out), "--program", "fiwalk", "--program-version", "4.3"]) == 0

    root = parse_document(out.read_text())
    assert root.tag == "dfxml"
    assert root.find("creator/program").text == "fiwalk"
    assert root.find("creator/version").text == "4.3"
    assert root.find("command") is None


def test_record_command(workdir, parse_document):
    out = workdir / "run.xml"
    code = main(["-o", str(out), "--", sys.executable, "-c", "print('a<b')"])
    assert code == 0

    content = out.read_text()
    root = parse_document(content)
    command = root.find("command")
    assert command.find("exit_code").text == "0"
    assert [t.get("name") for t in command.findall("timestamp")] == ["start", "end"]
    assert "<stdout>a&lt;b%0A</stdout>" in content
    assert command.find("stderr").text is None


def test_record_command_with_binary_output(workdir):
    out = workdir / "run.xml"
    code = main([
        "-o", str(out), "--",
        sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe raw')",
    ])
    assert code == 0
    assert b"<stdout>\xff\xfe raw</stdout>" in out.read_bytes()


def test_record_propagates_exit_code(workdir):
    out = workdir / "run.xml"
    code = main(["-o", str(out), "--", sys.executable, "-c", "import sys; sys.exit(4)"])
    assert code == 4
    assert "<exit_code>4</exit_code>" in out.read_text()


def test_record_missing_command(workdir):
    out = workdir / "run.xml"
    assert main(["-o", str(out), "--", "definitely-not-a-real-binary-xyz"]) == EXIT_NOT_STARTED
    assert "<error>" in out.read_text()


def test_record_with_dtd(workdir, parse_document):
    out = workdir / "run.xml"
    assert main(["-o", str(out), "--dtd"]) == 0

    content = out.read_text()
    assert content.startswith(XML_HEADER + "<!DOCTYPE fiwalk\n")
    assert "<!ELEMENT creator ANY >" in content
    assert parse_document(content).tag == "dfxml"
    assert sorted(p.name for p in workdir.iterdir()) == ["run.xml"]


def test_config_file_enables_dtd(workdir):
    (workdir / ".dfxml_config.json").write_text(json.dumps({"make_dtd": True, "dtd_root": "dfxml"}))
    out = workdir / "run.xml"
    assert main(["-o", str(out)]) == 0
    assert "<!DOCTYPE dfxml\n" in out.read_text()


def test_record_to_stdout(workdir, capsys):
    assert main(["--program", "tool"]) == 0
    out = capsys.readouterr().out
    assert out.startswith(XML_HEADER)
    assert "<program>tool</program>" in out


def test_unwritable_output_returns_error(workdir, caplog):
    blocker = workdir / "afile"
    blocker.write_text("not a directory")
    assert main(["-o", str(blocker / "run.xml")]) == 1
    assert "Error while writing DFXML" in caplog.text


def test_record_binary_output_to_stdout(workdir, capsysbinary):
    code = main(["--", sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff raw')"])
    assert code == 0
    assert b"<stdout>\xff raw</stdout>" in capsysbinary.readouterr().out
