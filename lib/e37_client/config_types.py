from __future__ import annotations

from dataclasses import dataclass, field

from .errors import ConfigError

DEFAULT_URL = "https://172.38.30.2:8443"
DEFAULT_USERNAME = "admin"
DEFAULT_PASSWORD = "admin"
DEFAULT_CONCURRENCY = 10
DEFAULT_TIMEOUT_S = 1.6
DEFAULT_INSECURE = True


@dataclass(frozen=True)
class E37Options:
    url: str = DEFAULT_URL
    username: str = DEFAULT_USERNAME
    # write-only: consumed by the login exchange, never shown
    password: str = field(default=DEFAULT_PASSWORD, repr=False)
    # advisory, enforced by callers
    concurrency: int = DEFAULT_CONCURRENCY
    timeout_s: float = DEFAULT_TIMEOUT_S
    insecure: bool = DEFAULT_INSECURE

    def __post_init__(self) -> None:
        try:
            concurrency = int(self.concurrency)
            timeout_s = float(self.timeout_s)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid option value: {e}") from e
        if concurrency < 1:
            raise ConfigError(f"concurrency must be >= 1, got {self.concurrency}")
        if timeout_s <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout_s}")
