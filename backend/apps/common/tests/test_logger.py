import logging
from decimal import Decimal

from apps.common.logger import AppLogger, get_logger


def test_bind_merges_context_without_mutating_parent(caplog):
    base = get_logger("tests.logger").bind(component="shopping")
    child = base.bind(service="ShoppingService")

    with caplog.at_level(logging.INFO, logger="tests.logger"):
        child.info("Cart created", user_id=7, total=Decimal("10.00"))

    assert base.context == {"component": "shopping"}
    assert caplog.records[-1].getMessage() == (
        "Cart created | component=shopping service=ShoppingService user_id=7 total=10.00"
    )


def test_exception_attaches_traceback(caplog):
    log = AppLogger("tests.logger")
    with caplog.at_level(logging.ERROR, logger="tests.logger"):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("Failed")
    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert record.exc_info is not None


def test_disabled_level_is_skipped(caplog):
    log = AppLogger("tests.quiet")
    with caplog.at_level(logging.WARNING, logger="tests.quiet"):
        log.debug("noise", payload=[1, 2])
    assert not caplog.records


def test_enums_and_dates_are_rendered_by_value():
    from datetime import datetime, timezone
    from apps.api.exceptions import ErrorKind

    assert AppLogger._stringify(ErrorKind.NOT_FOUND) == "NOT_FOUND"
    assert AppLogger._stringify(datetime(2024, 1, 2, tzinfo=timezone.utc)) == "2024-01-02T00:00:00+00:00"
    assert AppLogger._stringify({"a": 1}) == "{'a': 1}"
