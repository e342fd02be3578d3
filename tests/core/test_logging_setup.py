from __future__ import annotations

import io
import json

import pytest
import structlog

from recruiter.logging import bind_context, clear_context, configure_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    clear_context()
    structlog.reset_defaults()


def test_configure_logging_writes_json_with_bound_context():
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)
    bind_context(data_dir="/srv/recruiter")

    structlog.get_logger("recruiter.test").info("candidate.scored", candidate_id="C-1", score=40)

    event = json.loads(stream.getvalue().strip())
    assert event["event"] == "candidate.scored"
    assert event["level"] == "info"
    assert event["score"] == 40
    assert event["data_dir"] == "/srv/recruiter"
    assert event["timestamp"]


def test_configure_logging_filters_below_level():
    stream = io.StringIO()
    configure_logging("warning", stream=stream)

    logger = structlog.get_logger("recruiter.test")
    logger.info("store.loaded")
    logger.warning("weights.clamped", factor="skillsMatch")

    lines = stream.getvalue().strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["event"] == "weights.clamped"
