"""Tests for logging helpers."""

import logging

import pytest

from insightspy.core.logs import ROOT_LOGGER_NAME, get_logger, log_exception


class TestGetLogger:
    """Tests for get_logger()."""

    @pytest.mark.core
    def test_default_is_package_root(self) -> None:
        assert get_logger().name == ROOT_LOGGER_NAME

    @pytest.mark.core
    def test_package_module_name_kept(self) -> None:
        assert get_logger("insightspy.core.report").name == "insightspy.core.report"

    @pytest.mark.core
    def test_foreign_name_nested_under_package(self) -> None:
        """Names outside the package namespace are nested under it."""
        assert get_logger("myapp").name == "insightspy.myapp"

    @pytest.mark.core
    def test_prefix_lookalike_is_nested(self) -> None:
        assert get_logger("insightspyx").name == "insightspy.insightspyx"


class TestLogException:
    """Tests for log_exception()."""

    @pytest.mark.core
    def test_logs_with_traceback_and_attributes(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = get_logger("tests.logs")
        with caplog.at_level(logging.ERROR, logger=ROOT_LOGGER_NAME):
            try:
                raise ValueError("boom")
            except ValueError:
                log_exception("Pass failed", logger=logger, metric_name="MyTimer")

        (record,) = caplog.records
        assert record.getMessage() == "Pass failed"
        assert record.levelno == logging.ERROR
        assert record.exc_info is not None
        assert record.exc_info[0] is ValueError
        assert record.metric_name == "MyTimer"  # type: ignore[attr-defined]

    @pytest.mark.core
    def test_level_can_be_lowered(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=ROOT_LOGGER_NAME):
            try:
                raise KeyError("k")
            except KeyError:
                log_exception("Skipped metric", level=logging.WARNING)

        assert [r.levelno for r in caplog.records] == [logging.WARNING]

    @pytest.mark.core
    def test_default_logger_is_package_root(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger=ROOT_LOGGER_NAME):
            try:
                raise RuntimeError("x")
            except RuntimeError:
                log_exception("Oops")

        assert caplog.records[0].name == ROOT_LOGGER_NAME
