import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

from typing_extensions import Self

from kv_fallback.errors import ConfigurationError

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379
DEFAULT_DB = 0
DEFAULT_SOCKET_TIMEOUT = 1.0
DEFAULT_MAX_RETRIES = 1

MAX_PORT = 65535


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection settings for the Redis server backing the store."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    password: str | None = None
    db: int = DEFAULT_DB

    socket_timeout: float = DEFAULT_SOCKET_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    def __post_init__(self) -> None:
        if not self.host or any(char.isspace() for char in self.host):
            raise ConfigurationError(message="Host must be a non-empty string without whitespace.", extra_info={"host": self.host})

        if not 1 <= self.port <= MAX_PORT:
            raise ConfigurationError(message=f"Port must be between 1 and {MAX_PORT}.", extra_info={"port": self.port})

        if self.db < 0:
            raise ConfigurationError(message="Database index must not be negative.", extra_info={"db": self.db})

        if self.socket_timeout <= 0:
            raise ConfigurationError(message="Socket timeout must be positive.", extra_info={"socket_timeout": self.socket_timeout})

        if self.max_retries < 0:
            raise ConfigurationError(message="Max retries must not be negative.", extra_info={"max_retries": self.max_retries})

    @property
    def endpoint(self) -> str:
        """The host and port, for log messages."""
        return f"{self.host}:{self.port}/{self.db}"

    @classmethod
    def from_url(cls, url: str) -> Self:
        """Build a configuration from a Redis URL (e.g., redis://:password@localhost:6379/0)."""
        parsed_url = urlparse(url)

        if parsed_url.scheme not in ("redis", "rediss"):
            raise ConfigurationError(message="URL scheme must be redis or rediss.", extra_info={"scheme": parsed_url.scheme})

        try:
            port = parsed_url.port or DEFAULT_PORT
            db = int(parsed_url.path.lstrip("/")) if parsed_url.path and parsed_url.path != "/" else DEFAULT_DB
        except ValueError as e:
            raise ConfigurationError(message=f"Invalid Redis URL: {e}", extra_info={"url": url}) from e

        return cls(
            host=parsed_url.hostname or DEFAULT_HOST,
            port=port,
            password=parsed_url.password or None,
            db=db,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, prefix: str = "REDIS_") -> Self:
        """Build a configuration from HOST, PORT, PASSWORD and DB environment variables.

        Args:
            environ: The variables to read. Defaults to os.environ.
            prefix: The prefix of each variable name. Defaults to REDIS_.
        """
        if environ is None:
            environ = os.environ

        def _int_var(name: str, default: int) -> int:
            raw_value = environ.get(prefix + name)
            if raw_value is None or raw_value == "":
                return default
            try:
                return int(raw_value)
            except ValueError as e:
                raise ConfigurationError(message="Environment variable must be an integer.", extra_info={prefix + name: raw_value}) from e

        return cls(
            host=environ.get(prefix + "HOST") or DEFAULT_HOST,
            port=_int_var("PORT", DEFAULT_PORT),
            password=environ.get(prefix + "PASSWORD") or None,
            db=_int_var("DB", DEFAULT_DB),
        )
