"""Unit tests for settings helpers."""

from link_metadata.config.settings import Settings


def test_defaults():
    base = Settings()

    assert base.unfurl_endpoint == "https://api.microlink.io/"
    assert base.inter_request_delay_seconds == 1.0
    assert base.title_max_length == 200
    assert base.description_max_length == 300
    assert base.short_title_length == 50


def test_settings_helpers():
    base = Settings()

    with_key = base.model_copy(update={"unfurl_api_key": "token"})
    assert with_key.is_unfurl_authenticated() is True
    assert base.model_copy(update={"unfurl_api_key": None}).is_unfurl_authenticated() is False


def test_ssl_context_priority():
    base = Settings()

    assert base.model_copy(update={"ssl_verify": False, "ssl_ca_bundle": "/ca.pem"}).get_ssl_context() is False
    assert base.model_copy(update={"ssl_ca_bundle": "/ca.pem", "ssl_cert_dir": "/certs"}).get_ssl_context() == "/ca.pem"
    assert base.model_copy(update={"ssl_ca_bundle": None, "ssl_cert_dir": "/certs"}).get_ssl_context() == "/certs"
    assert (
        base.model_copy(update={"ssl_verify": True, "ssl_ca_bundle": None, "ssl_cert_dir": None}).get_ssl_context()
        is True
    )


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("LINKMETA_INTER_REQUEST_DELAY_SECONDS", "2.5")
    monkeypatch.setenv("LINKMETA_UNFURL_API_KEY", "secret")

    settings = Settings()

    assert settings.inter_request_delay_seconds == 2.5
    assert settings.unfurl_api_key == "secret"
