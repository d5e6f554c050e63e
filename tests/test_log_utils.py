import logging
from types import SimpleNamespace

import pytest

import farm_engine
from farm_ai import log_utils
from farm_engine.exceptions import ProviderError, QuotaExceededError

LOGGER = logging.getLogger("farm_ai.test")


@pytest.fixture(autouse=True)
def _clear_warnings():
    log_utils.reset_warnings()
    yield
    log_utils.reset_warnings()


def test_warn_once_rate_limits(caplog):
    with caplog.at_level(logging.WARNING):
        assert log_utils.warn_once(LOGGER, "quota", "first") is True
        assert log_utils.warn_once(LOGGER, "quota", "second") is False
        assert log_utils.warn_once(LOGGER, "other", "third") is True

    assert [record.getMessage() for record in caplog.records] == ["quota: first", "other: third"]


def test_warn_once_after_window(caplog, monkeypatch):
    clock = iter([100.0, 200.0])
    monkeypatch.setattr(log_utils, "time", SimpleNamespace(monotonic=lambda: next(clock)))
    with caplog.at_level(logging.WARNING):
        log_utils.warn_once(LOGGER, "quota", "first", window=60)
        log_utils.warn_once(LOGGER, "quota", "again", window=60)

    assert len(caplog.records) == 2


def test_quota_fallbacks_are_throttled(caplog):
    with caplog.at_level(logging.WARNING):
        for _ in range(3):
            log_utils.log_fallback(LOGGER, "weather", QuotaExceededError("429"), "synthetic weather")

    assert [record.getMessage() for record in caplog.records] == ["weather_quota: quota exceeded, synthetic weather"]


def test_other_fallbacks_log_errors(caplog):
    with caplog.at_level(logging.WARNING):
        log_utils.log_fallback(LOGGER, "weather", ProviderError("HTTP 500"), "synthetic weather")
        log_utils.log_fallback(LOGGER, "weather", ProviderError("HTTP 500"), "synthetic weather")

    assert len(caplog.records) == 2
    assert all(record.levelno == logging.ERROR for record in caplog.records)
    assert caplog.records[0].exc_info is not None


def test_lazy_package_exports():
    from farm_engine.store import FarmStore

    assert farm_engine.FarmStore is FarmStore
    with pytest.raises(AttributeError):
        farm_engine.not_a_name  # noqa: B018
