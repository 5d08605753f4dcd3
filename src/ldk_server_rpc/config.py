"""Server and client configuration.

Both configs can be built from environment variables; CLI options
override whatever the environment provides.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "LDK_SERVER_"

# Bodies above this size are rejected before they are fully buffered.
DEFAULT_MAX_BODY_SIZE = 10 * 1024 * 1024


@dataclass
class ServerConfig:
    """Configuration for the RPC server."""

    host: str = "127.0.0.1"
    port: int = 3000
    max_body_size: int = DEFAULT_MAX_BODY_SIZE
    log_level: str = "info"

    def __post_init__(self) -> None:
        if self.max_body_size <= 0:
            raise ValueError(f"max_body_size must be positive, got {self.max_body_size}")

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> ServerConfig:
        """Load from ``{prefix}HOST``, ``{prefix}PORT``, ``{prefix}MAX_BODY_SIZE``
        and ``{prefix}LOG_LEVEL``, falling back to defaults."""
        defaults = cls()
        env = os.environ
        return cls(
            host=env.get(f"{prefix}HOST", defaults.host),
            port=int(env.get(f"{prefix}PORT", defaults.port)),
            max_body_size=int(env.get(f"{prefix}MAX_BODY_SIZE", defaults.max_body_size)),
            log_level=env.get(f"{prefix}LOG_LEVEL", defaults.log_level).lower(),
        )


@dataclass
class ClientConfig:
    """Configuration for the SDK client.

    ``base_url`` is ``host:port`` without a scheme; the client always
    speaks plain HTTP.
    """

    base_url: str = "localhost:3000"
    timeout: float | None = 30.0

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> ClientConfig:
        """Load from ``{prefix}BASE_URL`` and ``{prefix}TIMEOUT``.

        A timeout of ``0`` or ``none`` disables the timeout.
        """
        defaults = cls()
        env = os.environ
        timeout: float | None = defaults.timeout
        raw_timeout = env.get(f"{prefix}TIMEOUT")
        if raw_timeout is not None:
            timeout = None if raw_timeout.lower() in ("0", "none", "") else float(raw_timeout)
        return cls(
            base_url=env.get(f"{prefix}BASE_URL", defaults.base_url),
            timeout=timeout,
        )
