"""Tests for logging configuration and diagnostics."""

import logging
import pytest

from flowgraph.core.logging import (
    LogComponent,
    LogLevel,
    PrettyFormatter,
    PrettyLogHandler,
    VerbosityLevel,
    configure_logging,
    get_logger,
    log_verbose,
)
from flowgraph.core.graph import Diagnostic, DiagnosticKind, log_diagnostic


@pytest.fixture
def restore_logging():
    """Fixture removing configured handlers and restoring levels after a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    levels = {c: logging.getLogger(c.value).level for c in LogComponent}
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    for component, component_level in levels.items():
        logging.getLogger(component.value).setLevel(component_level)


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_pretty_handler(self, restore_logging):
        """Test the default configuration installs the pretty handler."""
        configure_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], PrettyLogHandler)
        assert isinstance(handlers[0].formatter, PrettyFormatter)

    def test_component_levels(self, restore_logging):
        """Test component levels are applied."""
        configure_logging(
            default_level=LogLevel.WARNING,
            component_levels={LogComponent.NODES: LogLevel.DEBUG},
            pretty=False
        )
        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger(LogComponent.NODES.value).level == logging.DEBUG

    def test_log_file(self, restore_logging, tmp_path):
        """Test a log file handler is added."""
        log_file = tmp_path / "flow.log"
        configure_logging(log_file=str(log_file))
        get_logger(LogComponent.GRAPH).warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "written to file" in log_file.read_text()


class TestLogHelpers:
    """Test suite for logging helpers."""

    def test_get_logger(self):
        """Test component loggers use the component names."""
        assert get_logger(LogComponent.GRAPH).name == "flowgraph.core.graph"

    def test_log_verbose(self, caplog):
        """Test verbose messages are only emitted at VERBOSE or below."""
        logger = get_logger(LogComponent.GRAPH)
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_verbose(logger, "hidden")
        with caplog.at_level(VerbosityLevel.VERBOSE, logger=logger.name):
            log_verbose(logger, "shown")
        assert "hidden" not in caplog.text
        assert "shown" in caplog.text

    def test_formatter_symbols(self):
        """Test the pretty formatter colours the level name."""
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        formatted = PrettyFormatter("%(colored_level)s %(message)s").format(record)
        assert "WARNING" in formatted
        assert "careful" in formatted


class TestDiagnostics:
    """Test suite for the default diagnostic hook."""

    def test_log_diagnostic(self, caplog):
        """Test the default hook logs a warning on the graph logger."""
        diagnostic = Diagnostic(
            kind=DiagnosticKind.UNMATCHED_ACTION,
            message="Flow ends: 'x' not found in ['y']",
            node="main",
            action="x",
            registered_actions=["y"],
        )
        with caplog.at_level(logging.WARNING):
            log_diagnostic(diagnostic)
        assert caplog.records[0].name == "flowgraph.core.graph"
        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].getMessage() == "[main] Flow ends: 'x' not found in ['y']"
