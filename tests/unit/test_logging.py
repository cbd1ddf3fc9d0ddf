import io
import json
import logging

import pytest
import structlog

from conftest import read_fixture
from keyforge.envelope import decode_private, encode_private
from keyforge.generate import generate_key
from keyforge.logging import LOGGER_NAME, configure_logging, get_logger, level_from_name


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    structlog.reset_defaults()
    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(logging.NOTSET)
    root.propagate = True


def test_json_records_on_stderr(capsys):
    configure_logging("debug")
    get_logger("keyforge.test").info("envelope.encode", cipher="aes256-ctr")
    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["msg"] == "envelope.encode"
    assert record["level"] == "info"
    assert record["component"] == "keyforge.test"
    assert record["cipher"] == "aes256-ctr"
    assert "ts" in record


def test_level_filtering(capsys):
    configure_logging("warning")
    get_logger("keyforge.test").info("suppressed")
    assert capsys.readouterr().err == ""


def test_library_calls_write_nothing_before_configuration(capsys):
    key = decode_private(read_fixture("ed25519"))
    encode_private(key)
    generate_key("ed25519")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_module_loggers_follow_later_configuration():
    sink = io.StringIO()
    configure_logging("debug", stream=sink)
    decode_private(read_fixture("ed25519"))
    records = [json.loads(line) for line in sink.getvalue().splitlines()]
    assert [record["msg"] for record in records] == ["envelope.decode"]
    assert records[0]["component"] == "keyforge.envelope"
    assert records[0]["key_type"] == "ssh-ed25519"


def test_plain_stdlib_records_share_the_format():
    sink = io.StringIO()
    configure_logging("info", stream=sink)
    logging.getLogger("keyforge.plain").warning("disk %s", "full")
    record = json.loads(sink.getvalue())
    assert record["msg"] == "disk full"
    assert record["level"] == "warning"
    assert record["component"] == "keyforge.plain"


def test_console_format():
    sink = io.StringIO()
    configure_logging("info", stream=sink, json_format=False)
    get_logger("keyforge.test").info("keygen.generate", bits=256)
    line = sink.getvalue()
    assert "keygen.generate" in line
    assert "bits=256" in line


def test_reconfiguring_replaces_the_handler():
    first, second = io.StringIO(), io.StringIO()
    configure_logging("info", stream=first)
    configure_logging("info", stream=second)
    get_logger("keyforge.test").info("once")
    assert first.getvalue() == ""
    assert len(second.getvalue().splitlines()) == 1
    assert len(logging.getLogger(LOGGER_NAME).handlers) == 1


@pytest.mark.parametrize(
    ("name", "level"),
    [("DEBUG", logging.DEBUG), ("warning", logging.WARNING), (None, logging.INFO), ("verbose", logging.INFO)],
)
def test_level_from_name(name, level):
    assert level_from_name(name) == level
