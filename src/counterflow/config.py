"""
Configuration Management for counterflow

🔧 Unified Configuration System:
Dataclass-based configuration for the engine, the audit log, the web
adapter and logging, with per-environment defaults and environment
variable overrides.
"""

from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field
from enum import Enum
import json
import os
from pathlib import Path

from .core.state import MIN_LIMIT, MAX_LIMIT


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


@dataclass
class EngineConfig:
    """Counter engine configuration"""
    min_limit: int = MIN_LIMIT
    max_limit: int = MAX_LIMIT
    reset_delay: float = 3.0  # seconds
    reset_scheduled_message: str = "reset scheduled in {delay:g} seconds"
    reset_cancelled_message: str = "reset cancelled"
    audit_message: str = "counted 1"

    def __post_init__(self):
        if self.min_limit > self.max_limit:
            raise ValueError(
                f"min_limit ({self.min_limit}) must not exceed max_limit ({self.max_limit})"
            )
        if self.reset_delay < 0:
            raise ValueError(f"reset_delay must be non-negative, got {self.reset_delay}")

    def scheduled_message(self) -> str:
        return self.reset_scheduled_message.format(delay=self.reset_delay)


@dataclass
class PersistenceConfig:
    """Audit log persistence configuration"""
    backend: str = "sql"  # "sql" or "memory"
    url: str = "sqlite:///counterflow.db"
    echo: bool = False


@dataclass
class WebConfig:
    """Web adapter configuration"""
    host: str = "localhost"
    port: int = 8000
    secret_key: Optional[str] = None
    auto_reload: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class ApplicationConfig:
    """Complete application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    engine: EngineConfig = field(default_factory=EngineConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'ApplicationConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.web.auto_reload = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.persistence.backend = "memory"
            config.persistence.url = "sqlite:///:memory:"
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.web.auto_reload = False
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary"""
        environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        config = cls.for_environment(environment)

        if "debug" in config_dict:
            config.debug = bool(config_dict["debug"])

        if "engine" in config_dict:
            # Rebuild so __post_init__ validates the merged values
            merged = {**config.engine.__dict__, **config_dict["engine"]}
            unknown = set(config_dict["engine"]) - set(EngineConfig.__dataclass_fields__)
            if unknown:
                raise ValueError(f"Unknown engine settings: {sorted(unknown)}")
            config.engine = EngineConfig(**merged)

        for section in ("persistence", "web", "logging"):
            if section in config_dict:
                target = getattr(config, section)
                for key, value in config_dict[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'ApplicationConfig':
        """Load configuration from a JSON file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix != '.json':
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        with open(config_path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_environment(cls) -> 'ApplicationConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('COUNTERFLOW_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        if os.getenv('COUNTERFLOW_DEBUG'):
            config.debug = os.getenv('COUNTERFLOW_DEBUG').lower() == 'true'

        if os.getenv('COUNTERFLOW_DATABASE_URL'):
            config.persistence.backend = "sql"
            config.persistence.url = os.getenv('COUNTERFLOW_DATABASE_URL')

        if os.getenv('COUNTERFLOW_RESET_DELAY'):
            config.engine = EngineConfig(
                **{**config.engine.__dict__, "reset_delay": float(os.getenv('COUNTERFLOW_RESET_DELAY'))}
            )

        if os.getenv('COUNTERFLOW_SECRET_KEY'):
            config.web.secret_key = os.getenv('COUNTERFLOW_SECRET_KEY')

        if os.getenv('COUNTERFLOW_HOST'):
            config.web.host = os.getenv('COUNTERFLOW_HOST')

        if os.getenv('COUNTERFLOW_PORT'):
            config.web.port = int(os.getenv('COUNTERFLOW_PORT'))

        if os.getenv('COUNTERFLOW_LOG_LEVEL'):
            config.logging.level = os.getenv('COUNTERFLOW_LOG_LEVEL').upper()

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "engine": dict(self.engine.__dict__),
            "persistence": dict(self.persistence.__dict__),
            "web": {
                "host": self.web.host,
                "port": self.web.port,
                "auto_reload": self.web.auto_reload,
            },
            "logging": dict(self.logging.__dict__),
        }


# Global configuration management
_current_config: Optional[ApplicationConfig] = None


def set_config(config: Optional[ApplicationConfig]):
    """Set the global configuration (None forces a reload on next access)"""
    global _current_config
    _current_config = config


def get_config() -> ApplicationConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        # Auto-create from environment if not set
        _current_config = ApplicationConfig.from_environment()

    return _current_config


__all__ = [
    "ApplicationConfig", "Environment", "EngineConfig", "PersistenceConfig",
    "WebConfig", "LoggingConfig", "set_config", "get_config",
]
