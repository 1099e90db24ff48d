"""
Configuration for AlloyShare.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class SolverConfig(BaseModel):
    """Remote solver service configuration."""

    url: str = "http://localhost:8080"
    get_instances_path: str = "/getInstances"
    next_instances_path: str = "/nextInstances"
    # Seconds before a solve request is abandoned; a hung call never keeps a session busy.
    timeout: float = 60.0
    # Whether this editor was opened from a private link
    is_private: bool = False


class StoreConfig(BaseModel):
    """Model/link store configuration."""

    backend: str = "sqlite"  # sqlite
    db_path: str = "data/alloyshare.db"


class SecretsConfig(BaseModel):
    """Secret region markers."""

    start_marker: str = "//START_SECRET"
    end_marker: str = "//END_SECRET"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    solver: SolverConfig = Field(default_factory=SolverConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    secrets: SecretsConfig = Field(default_factory=SecretsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)

        Returns:
            Config instance

        Environment variables:
            ALLOY_SOLVER_URL: Solver service base URL
            ALLOY_SOLVER_TIMEOUT: Solve request timeout in seconds
            ALLOY_SOLVER_PRIVATE: Editor session opened from a private link
            ALLOY_STORE_BACKEND: Store backend (sqlite)
            ALLOY_STORE_DB_PATH: SQLite database path
            ALLOY_SECRET_START_MARKER: Secret region start marker
            ALLOY_SECRET_END_MARKER: Secret region end marker
            ALLOY_LOG_LEVEL: Log level
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            # Convert boolean strings
            if isinstance(default, bool):
                return str(value).lower() in ("true", "1", "yes")
            # Convert numeric strings
            if isinstance(default, int):
                return int(value)
            if isinstance(default, float):
                return float(value)
            return value

        return cls(
            solver=SolverConfig(
                url=get_env("ALLOY_SOLVER_URL", "http://localhost:8080"),
                get_instances_path=get_env("ALLOY_SOLVER_GET_PATH", "/getInstances"),
                next_instances_path=get_env("ALLOY_SOLVER_NEXT_PATH", "/nextInstances"),
                timeout=get_env("ALLOY_SOLVER_TIMEOUT", 60.0),
                is_private=get_env("ALLOY_SOLVER_PRIVATE", False),
            ),
            store=StoreConfig(
                backend=get_env("ALLOY_STORE_BACKEND", "sqlite"),
                db_path=get_env("ALLOY_STORE_DB_PATH", "data/alloyshare.db"),
            ),
            secrets=SecretsConfig(
                start_marker=get_env("ALLOY_SECRET_START_MARKER", "//START_SECRET"),
                end_marker=get_env("ALLOY_SECRET_END_MARKER", "//END_SECRET"),
            ),
            logging=LoggingConfig(
                level=get_env("ALLOY_LOG_LEVEL", "INFO"),
                log_to_file=get_env("ALLOY_LOG_TO_FILE", True),
                log_dir=get_env("ALLOY_LOG_DIR", "logs"),
                file_rotation=get_env("ALLOY_LOG_FILE_ROTATION", "10 MB"),
                file_retention=get_env("ALLOY_LOG_FILE_RETENTION", "7 days"),
                compression=get_env("ALLOY_LOG_COMPRESSION", "zip"),
                serialize=get_env("ALLOY_LOG_SERIALIZE", True),
            ),
        )

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f)

        return cls(**(data or {}))

    @classmethod
    def from_env_or_yaml(
        cls, yaml_path: str | Path | None = None, env_file: str | Path | None = None
    ) -> "Config":
        """
        Load configuration with priority: env vars > YAML > defaults.

        Args:
            yaml_path: Optional path to YAML config
            env_file: Optional path to .env file

        Returns:
            Config instance
        """
        # Start with YAML if provided
        if yaml_path and Path(yaml_path).exists():
            with open(yaml_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            config_dict = {}

        env_config = cls.from_env(env_file=env_file)

        # Merge: env vars override YAML
        final_dict = {**config_dict}

        # Apply env overrides (non-default values)
        default = cls()
        if env_config.solver != default.solver:
            final_dict["solver"] = env_config.solver.model_dump()
        if env_config.store != default.store:
            final_dict["store"] = env_config.store.model_dump()
        if env_config.secrets != default.secrets:
            final_dict["secrets"] = env_config.secrets.model_dump()
        if env_config.logging != default.logging:
            final_dict["logging"] = env_config.logging.model_dump()

        return cls(**final_dict) if final_dict else env_config

