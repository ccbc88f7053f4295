from __future__ import annotations

import io
import json
import logging

import pytest

from stratkit.strategies.builtin import DETECT, TRIM
from stratkit.strategies.errors import InvalidParameters
from stratkit.strategies.legacy import resolve_flags
from stratkit.strategies.logging_utils import JsonFormatter


@pytest.fixture()
def log_stream():
    stream = io.StringIO()
    logger = logging.getLogger("stratkit.legacy")
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    try:
        yield stream
    finally:
        logger.removeHandler(handler)


def _events(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def test_no_flags_keeps_descriptor() -> None:
    assert resolve_flags(DETECT, {"fixed": False, "perl": False}) is None
    assert resolve_flags(DETECT, {}, "boundary") == "boundary"


def test_single_flag_selects_tag() -> None:
    assert resolve_flags(DETECT, {"perl": True}) == "regex"
    assert resolve_flags(DETECT, {"fixed": True}) == "fixed"


def test_first_flag_in_precedence_wins(log_stream: io.StringIO) -> None:
    assert resolve_flags(DETECT, {"perl": True, "fixed": True}) == "fixed"

    events = _events(log_stream)
    assert len(events) == 1
    assert events[0]["message"] == "legacy_flag_ignored"
    assert events[0]["level"] == "WARNING"
    assert events[0]["flag"] == "perl"
    assert events[0]["overridden_by"] == "fixed"


def test_flag_with_explicit_descriptor_is_rejected() -> None:
    with pytest.raises(InvalidParameters) as exc:
        resolve_flags(DETECT, {"fixed": True}, "regex")
    assert exc.value.field == "fixed"
    assert "`engine`" in str(exc.value)


def test_unknown_flag_is_rejected() -> None:
    with pytest.raises(InvalidParameters) as exc:
        resolve_flags(TRIM, {"left": True})
    assert exc.value.field == "left"


def test_flag_errors_name_the_function() -> None:
    with pytest.raises(InvalidParameters) as exc:
        resolve_flags(TRIM, {"left": True})
    assert exc.value.tag is None
    assert exc.value.call_site == "str_trim"
    assert "for str_trim()" in str(exc.value)
    assert "strategy" not in str(exc.value)
