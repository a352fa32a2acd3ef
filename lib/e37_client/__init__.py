from .client import E37Client, SessionState
from .config_types import E37Options
from .errors import ApiError, AuthError, ConfigError, E37ClientError, NetworkError

# metric name prefixes used by collectors
NAME = "e37_exporter"
NAMESPACE = "e37"


def name() -> str:
    return NAME


__all__ = [
    "E37Client",
    "E37Options",
    "SessionState",
    "ApiError",
    "AuthError",
    "ConfigError",
    "E37ClientError",
    "NetworkError",
    "NAME",
    "NAMESPACE",
    "name",
]
