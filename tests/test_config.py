"""Configuration and wiring tests."""

import json
import logging

import pytest

from counterflow.app.configurator import build_audit_backend, build_engine, configure_logging
from counterflow.config import (
    ApplicationConfig, EngineConfig, Environment, LoggingConfig, PersistenceConfig,
    get_config, set_config,
)
from counterflow.persistence import MemoryAuditLog, SQLModelAuditLog


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert (config.min_limit, config.max_limit) == (0, 10)
        assert config.reset_delay == 3.0
        assert config.scheduled_message() == "reset scheduled in 3 seconds"

    def test_rejects_inverted_range(self):
        with pytest.raises(ValueError):
            EngineConfig(min_limit=5, max_limit=1)

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            EngineConfig(reset_delay=-1)


class TestApplicationConfig:

    def test_testing_environment_uses_memory_backend(self):
        config = ApplicationConfig.for_environment(Environment.TESTING)
        assert config.persistence.backend == "memory"
        assert config.logging.level == "WARNING"

    def test_development_environment_enables_debug(self):
        config = ApplicationConfig.for_environment(Environment.DEVELOPMENT)
        assert config.debug is True
        assert config.logging.level == "DEBUG"

    def test_from_dict_merges_sections(self):
        config = ApplicationConfig.from_dict({
            "environment": "production",
            "engine": {"reset_delay": 1.5},
            "web": {"port": 9000},
        })

        assert config.environment == Environment.PRODUCTION
        assert config.engine.reset_delay == 1.5
        assert config.engine.max_limit == 10
        assert config.web.port == 9000

    def test_from_dict_validates_engine(self):
        with pytest.raises(ValueError):
            ApplicationConfig.from_dict({"engine": {"min_limit": 20}})
        with pytest.raises(ValueError):
            ApplicationConfig.from_dict({"engine": {"speed": 2}})

    def test_from_file(self, tmp_path):
        path = tmp_path / "counterflow.json"
        path.write_text(json.dumps({"environment": "testing", "engine": {"max_limit": 3}}))

        config = ApplicationConfig.from_file(path)

        assert config.environment == Environment.TESTING
        assert config.engine.max_limit == 3

    def test_from_file_rejects_unknown_format(self, tmp_path):
        path = tmp_path / "counterflow.yaml"
        path.write_text("engine: {}")
        with pytest.raises(ValueError):
            ApplicationConfig.from_file(path)

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ApplicationConfig.from_file(tmp_path / "nope.json")

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("COUNTERFLOW_ENV", "production")
        monkeypatch.setenv("COUNTERFLOW_RESET_DELAY", "0.5")
        monkeypatch.setenv("COUNTERFLOW_DATABASE_URL", "sqlite:///other.db")
        monkeypatch.setenv("COUNTERFLOW_PORT", "8123")
        monkeypatch.setenv("COUNTERFLOW_LOG_LEVEL", "warning")

        config = ApplicationConfig.from_environment()

        assert config.environment == Environment.PRODUCTION
        assert config.engine.reset_delay == 0.5
        assert config.persistence.url == "sqlite:///other.db"
        assert config.web.port == 8123
        assert config.logging.level == "WARNING"

    def test_to_dict_omits_secret_key(self):
        config = ApplicationConfig()
        config.web.secret_key = "hunter2"

        data = config.to_dict()

        assert "secret_key" not in data["web"]
        assert data["engine"]["reset_delay"] == 3.0

    def test_global_config(self, monkeypatch):
        monkeypatch.setenv("COUNTERFLOW_ENV", "testing")
        set_config(None)
        try:
            assert get_config().environment == Environment.TESTING
            custom = ApplicationConfig()
            set_config(custom)
            assert get_config() is custom
        finally:
            set_config(None)


class TestConfigurator:

    def test_build_audit_backend(self):
        assert isinstance(build_audit_backend(PersistenceConfig(backend="memory")), MemoryAuditLog)

        sql = build_audit_backend(PersistenceConfig(backend="sql", url="sqlite://"))
        assert isinstance(sql, SQLModelAuditLog)
        sql.close()

        with pytest.raises(ValueError):
            build_audit_backend(PersistenceConfig(backend="redis"))

    @pytest.mark.asyncio
    async def test_build_engine(self):
        config = ApplicationConfig.for_environment(Environment.TESTING)
        config.engine = EngineConfig(max_limit=3)

        engine = build_engine(config, initial_count=7)

        assert engine.state.count == 3
        assert isinstance(engine.audit.backend, MemoryAuditLog)
        await engine.aclose()

    def test_configure_logging_replaces_handlers(self):
        logger = configure_logging(LoggingConfig(level="info"))
        configure_logging(LoggingConfig(level="debug"))
        try:
            named = [h for h in logger.handlers if h.get_name() == "counterflow"]
            assert len(named) == 1
            assert logger.level == logging.DEBUG
        finally:
            for handler in named:
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
