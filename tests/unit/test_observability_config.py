"""Unit tests for observability setup."""

import logging
import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from pythonjsonlogger import jsonlogger

from food_ordering_service.observability.config import configure_logging, setup_observability


@pytest.mark.unit
class TestSetupObservability:
    """Tests for setup_observability function."""

    @patch("food_ordering_service.observability.config.FastAPIInstrumentor")
    @patch("food_ordering_service.observability.config.BotocoreInstrumentor")
    @patch("food_ordering_service.observability.config.setup_metrics")
    @patch("food_ordering_service.observability.config.setup_tracing")
    @patch("food_ordering_service.observability.config.metrics.set_meter_provider")
    @patch("food_ordering_service.observability.config.trace.set_tracer_provider")
    @patch.dict(os.environ, {"ENVIRONMENT": "test"}, clear=True)
    def test_test_environment_skips_exporters(
        self,
        mock_set_tracer_provider: Mock,
        mock_set_meter_provider: Mock,
        mock_setup_tracing: Mock,
        mock_setup_metrics: Mock,
        mock_botocore: Mock,
        mock_fastapi: Mock,
    ) -> None:
        app = MagicMock()

        setup_observability(app, enable_exporters=True)

        mock_setup_tracing.assert_not_called()
        mock_setup_metrics.assert_not_called()
        mock_set_tracer_provider.assert_called_once()
        mock_set_meter_provider.assert_called_once()
        mock_botocore.return_value.instrument.assert_called_once_with()
        mock_fastapi.instrument_app.assert_called_once_with(app)

    @patch("food_ordering_service.observability.config.FastAPIInstrumentor")
    @patch("food_ordering_service.observability.config.BotocoreInstrumentor")
    @patch("food_ordering_service.observability.config.setup_metrics")
    @patch("food_ordering_service.observability.config.setup_tracing")
    @patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True)
    def test_exporters_enabled_outside_tests(
        self,
        mock_setup_tracing: Mock,
        mock_setup_metrics: Mock,
        mock_botocore: Mock,
        mock_fastapi: Mock,
    ) -> None:
        setup_observability(enable_exporters=True)

        mock_setup_tracing.assert_called_once()
        mock_setup_metrics.assert_called_once()
        mock_botocore.return_value.instrument.assert_called_once_with()
        mock_fastapi.instrument_app.assert_not_called()


@pytest.mark.unit
class TestConfigureLogging:
    """Tests for configure_logging function."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root_logger = logging.getLogger()
        level = root_logger.level
        yield
        for handler in root_logger.handlers[:]:
            if isinstance(handler.formatter, jsonlogger.JsonFormatter):
                root_logger.removeHandler(handler)
        root_logger.setLevel(level)

    @patch.dict(os.environ, {"LOG_LEVEL": "warning"}, clear=True)
    def test_env_level_overrides_argument(self) -> None:
        configure_logging("DEBUG")

        assert logging.getLogger().level == logging.WARNING

    @patch.dict(os.environ, {}, clear=True)
    def test_replaces_handlers_with_single_json_handler(self) -> None:
        configure_logging("INFO")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, jsonlogger.JsonFormatter)
