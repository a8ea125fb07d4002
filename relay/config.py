import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 8080
DELIVERY_TIMEOUT_SECONDS = 30
INPUT_SHAPES = ("auto", "nested", "legacy")


class ConfigError(Exception):
    """Raised when the process configuration cannot be used to start the relay."""


class Config:
    """Base configuration class with common settings."""
    # CORS configuration
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Logging
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.environ.get("LOG_FILE")


class LocalConfig(Config):
    """Configuration for local development."""
    ENV = "local"
    DEBUG = True


class SandboxConfig(Config):
    """Configuration for sandbox/staging environment."""
    ENV = "sandbox"
    DEBUG = False


class ProductionConfig(Config):
    """Configuration for production environment."""
    ENV = "production"
    DEBUG = False


def get_config():
    """Get the appropriate configuration class based on environment variable.

    Environment is determined by FLASK_ENV or ENVIRONMENT variable:
    - 'local' or 'development' -> LocalConfig
    - 'sandbox' or 'staging' -> SandboxConfig
    - 'production' or 'prod' -> ProductionConfig

    Defaults to LocalConfig if not set.
    """
    env = (os.environ.get("FLASK_ENV") or os.environ.get("ENVIRONMENT", "local")).lower()

    if env in ["local", "development", "dev"]:
        return LocalConfig
    elif env in ["sandbox", "staging", "stage"]:
        return SandboxConfig
    elif env in ["production", "prod"]:
        return ProductionConfig
    else:
        return LocalConfig


@dataclass(frozen=True)
class RelaySettings:
    """Process settings for the relay, built once at startup."""
    discord_webhook_url: str
    jenkins_url: str = ""
    port: int = DEFAULT_PORT
    input_shape: str = "auto"
    delivery_timeout: float = DELIVERY_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RelaySettings":
        """
        Read the relay settings from the environment.

        Recognized variables:
            DISCORD_WEBHOOK_URL: destination for notifications (required)
            JENKINS_URL: Jenkins base URL, only shown in log lines
            PORT: listening port, defaults to 8080
            RELAY_INPUT_SHAPE: auto | nested | legacy

        Raises:
            ConfigError: if a required value is missing or a value is invalid
        """
        env = os.environ if environ is None else environ

        discord_url = (env.get("DISCORD_WEBHOOK_URL") or "").strip()
        if not discord_url:
            raise ConfigError("DISCORD_WEBHOOK_URL environment variable is required")

        raw_port = (env.get("PORT") or "").strip() or str(DEFAULT_PORT)
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigError(f"Invalid PORT value: {raw_port}") from None
        if port < 0:
            raise ConfigError(f"Invalid PORT value: {raw_port}")

        shape = (env.get("RELAY_INPUT_SHAPE") or "auto").strip().lower()
        if shape not in INPUT_SHAPES:
            raise ConfigError(
                f"Invalid RELAY_INPUT_SHAPE value: {shape} (expected one of {', '.join(INPUT_SHAPES)})"
            )

        return cls(
            discord_webhook_url=discord_url,
            jenkins_url=env.get("JENKINS_URL") or "",
            port=port,
            input_shape=shape,
        )
