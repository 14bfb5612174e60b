import json

import structlog

from mapred_query import setup_logging


def test_setup_logging_json(capsys):
    setup_logging("json")
    try:
        structlog.get_logger("mapred_query.test").info("query.validated", phases=2)
        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "query.validated"
        assert event["phases"] == 2
        assert event["level"] == "info"
    finally:
        structlog.reset_defaults()
