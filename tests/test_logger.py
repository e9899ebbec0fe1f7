"""
Tests for logger functionality.
"""

import pytest
from hirefunnel.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.metrics["records_created"] == 0

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context is appended as JSON."""
        logger = StructuredLogger(
            name="test-context",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Candidate saved", candidate_id="ABC12345", revision=2)

        content = next(tmp_path.glob("*.log")).read_text()
        assert 'Candidate saved | Context: {"candidate_id": "ABC12345", "revision": 2}' in content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_created()
        logger.record_created()
        logger.record_updated()
        logger.record_deleted()
        logger.record_admin_update()
        logger.record_failure("OperationalError", persistence=True)
        logger.record_failure("NotFoundError")

        metrics = logger.get_metrics()

        assert metrics["records_created"] == 2
        assert metrics["records_updated"] == 1
        assert metrics["records_deleted"] == 1
        assert metrics["admin_updates"] == 1
        assert metrics["persistence_failures"] == 1
        assert metrics["errors_by_type"] == {"OperationalError": 1, "NotFoundError": 1}

    def test_fit_share_calculation(self, tmp_path):
        """Fit share should be calculated correctly."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.record_assessment_scored("High Fit")
        logger.record_assessment_scored("High Fit")
        logger.record_assessment_scored("Review")

        metrics = logger.get_metrics()

        assert metrics["assessments_scored"] == 3
        assert metrics["fit_share"]["High Fit"] == pytest.approx(0.667, rel=0.01)
        assert metrics["fit_share"]["Review"] == pytest.approx(0.333, rel=0.01)

    def test_no_fit_share_without_assessments(self, tmp_path):
        logger = StructuredLogger(name="test", log_dir=tmp_path, enable_console=False)
        assert "fit_share" not in logger.get_metrics()

    def test_metrics_summary(self, tmp_path):
        logger = StructuredLogger(name="test-summary", log_dir=tmp_path, enable_console=False)
        logger.record_assessment_scored("Review")
        logger.record_failure("ConflictError", persistence=True)

        logger.log_metrics_summary()

        content = next(tmp_path.glob("*.log")).read_text()
        assert "Funnel Session Metrics" in content
        assert "Review: 1 (100.0%)" in content
        assert "ConflictError: 1" in content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("hirefunnel_*.log"))
        assert len(log_files) == 1

        log_content = log_files[0].read_text()
        assert "Test message" in log_content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self, tmp_path):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self, tmp_path):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(log_dir=tmp_path, enable_console=False)
        logger1.record_created()

        reset_logger()

        logger2 = get_logger(log_dir=tmp_path, enable_console=False)

        assert logger2.metrics["records_created"] == 0
