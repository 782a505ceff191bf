"""Environment-based configuration for the control client."""

from pydantic_settings import BaseSettings

from syslog_ng_ctl.channel import DEFAULT_TIMEOUT
from syslog_ng_ctl.metrics import DEFAULT_NAMESPACE


class Settings(BaseSettings):
    """Control client configuration.

    Every setting can be overridden via environment variables. For example:
        CONTROL_SOCKET=/var/lib/syslog-ng/syslog-ng.ctl
        CONTROL_TIMEOUT=5
    """

    # Path of the daemon's control socket; required, there is no default
    control_socket: str | None = None

    # Seconds allowed for one command/response exchange
    control_timeout: float = DEFAULT_TIMEOUT

    # Prefix for exported metric names
    metrics_namespace: str = DEFAULT_NAMESPACE

    model_config = {"env_prefix": ""}
