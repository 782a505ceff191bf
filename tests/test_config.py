"""Tests for environment-based settings."""

from syslog_ng_ctl.channel import DEFAULT_TIMEOUT
from syslog_ng_ctl.config import Settings


def test_defaults(monkeypatch):
    for var in ("CONTROL_SOCKET", "CONTROL_TIMEOUT", "METRICS_NAMESPACE"):
        monkeypatch.delenv(var, raising=False)

    settings = Settings()

    assert settings.control_socket is None
    assert settings.control_timeout == DEFAULT_TIMEOUT
    assert settings.metrics_namespace == "syslogng"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CONTROL_SOCKET", "/var/lib/syslog-ng/syslog-ng.ctl")
    monkeypatch.setenv("CONTROL_TIMEOUT", "1.5")
    monkeypatch.setenv("METRICS_NAMESPACE", "axosyslog")

    settings = Settings()

    assert settings.control_socket == "/var/lib/syslog-ng/syslog-ng.ctl"
    assert settings.control_timeout == 1.5
    assert settings.metrics_namespace == "axosyslog"
