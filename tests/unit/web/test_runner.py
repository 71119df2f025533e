"""Tests for the uvicorn logging setup."""

from uvicorn.config import LOGGING_CONFIG

from sessionkeeper.web.runner import build_log_config


class TestBuildLogConfig:
    def test_access_log_quiet_outside_debug(self):
        """Test that per-request access lines are suppressed in production mode."""
        assert build_log_config(debug=False)["loggers"]["uvicorn.access"]["level"] == "WARNING"
        assert build_log_config(debug=True)["loggers"]["uvicorn.access"]["level"] == "INFO"

    def test_uvicorn_defaults_are_not_mutated(self):
        """Test that building our config leaves uvicorn's module-level defaults untouched."""
        default_fmt = LOGGING_CONFIG["formatters"]["default"]["fmt"]
        default_level = LOGGING_CONFIG["loggers"]["uvicorn.access"]["level"]

        log_config = build_log_config(debug=False)

        assert log_config["formatters"]["default"]["fmt"] != default_fmt
        assert LOGGING_CONFIG["formatters"]["default"]["fmt"] == default_fmt
        assert LOGGING_CONFIG["loggers"]["uvicorn.access"]["level"] == default_level
