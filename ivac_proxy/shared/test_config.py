import pytest
from pydantic import ValidationError

from ivac_proxy.shared.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "IVAC_PROXY_HOST",
        "IVAC_PROXY_PORT",
        "IVAC_PROXY_UPSTREAM_ORIGIN",
        "IVAC_PROXY_MAX_ATTEMPTS",
        "IVAC_PROXY_BASE_DELAY_MS",
        "IVAC_PROXY_REQUEST_TIMEOUT",
        "IVAC_PROXY_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_fixed_deployment():
    settings = Settings()

    assert settings.port == 5000
    assert settings.upstream_origin == "https://payment.ivacbd.com"
    assert settings.upstream_host == "payment.ivacbd.com"
    assert settings.max_attempts == 3
    assert settings.base_delay_ms == 1000
    assert settings.request_timeout == 30.0


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("IVAC_PROXY_PORT", "8080")
    monkeypatch.setenv("ivac_proxy_upstream_origin", "https://staging.example.com:8443")

    settings = Settings()

    assert settings.port == 8080
    assert settings.upstream_host == "staging.example.com:8443"


def test_rejects_zero_attempts(monkeypatch):
    monkeypatch.setenv("IVAC_PROXY_MAX_ATTEMPTS", "0")

    with pytest.raises(ValidationError):
        Settings()
