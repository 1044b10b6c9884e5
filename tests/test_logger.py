import json
import logging

from cyberfish.logger import ConsoleFormatter, JsonLineFormatter, get_logger, setup_logging


def record(data=None):
    rec = logging.LogRecord("cyberfish.session", logging.WARNING, __file__, 1,
                            "Score not saved: %s", ("timeout",), None)
    if data is not None:
        rec.data = data
    return rec


def test_console_shows_fields():
    line = ConsoleFormatter().format(record({"name": "Rex", "score": 3}))
    assert line.endswith("W session: Score not saved: timeout name=Rex score=3")


def test_console_without_fields():
    assert ConsoleFormatter().format(record()).endswith("W session: Score not saved: timeout")


def test_json_line_merges_fields():
    entry = json.loads(JsonLineFormatter().format(record({"name": "Rex", "score": 3})))
    assert entry["level"] == "warning"
    assert entry["logger"] == "cyberfish.session"
    assert entry["msg"] == "Score not saved: timeout"
    assert (entry["name"], entry["score"]) == ("Rex", 3)


def test_setup_writes_json_file(tmp_path):
    path = tmp_path / "fish.log"
    setup_logging("debug", str(path))
    try:
        get_logger("server_db").info("Recorded", extra={"data": {"name": "A", "score": 10}})
        for handler in logging.getLogger("cyberfish").handlers:
            handler.flush()
        entry = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["name"] == "A"
        assert entry["score"] == 10
    finally:
        root = logging.getLogger("cyberfish")
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
