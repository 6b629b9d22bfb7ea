"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Link metadata pipeline configuration loaded from environment variables.

    All settings can be overridden via environment variables prefixed with LINKMETA_.
    For example, LINKMETA_INTER_REQUEST_DELAY_SECONDS=2.5 slows the queue down.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LINKMETA_",
        case_sensitive=False,
        extra="ignore",
    )

    # ─── Logging ─────────────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    # ─── Unfurl API ──────────────────────────────────────────────────
    unfurl_endpoint: str = "https://api.microlink.io/"
    # Microlink Pro key, sent as the x-api-key header
    unfurl_api_key: str | None = None
    request_timeout: float = 30.0

    # ─── SSL/TLS Settings ───────────────────────────────────────────
    ssl_cert_dir: str | None = None
    ssl_ca_bundle: str | None = None
    ssl_verify: bool = True

    # ─── Queue ───────────────────────────────────────────────────────
    inter_request_delay_seconds: float = 1.0
    backfill_limit: int = 5
    backfill_stagger_seconds: float = 2.0

    # ─── Metadata Shaping ────────────────────────────────────────────
    title_max_length: int = 200
    description_max_length: int = 300
    short_title_length: int = 50
    short_description_length: int = 100

    def is_unfurl_authenticated(self) -> bool:
        """Check if an unfurl API key is configured."""
        return bool(self.unfurl_api_key)

    def get_ssl_context(self) -> bool | str:
        """
        Get SSL verification configuration for httpx.

        Returns:
            - False if ssl_verify is disabled
            - Path to CA bundle/cert dir if configured
            - True for default SSL verification

        Priority: ssl_verify=False > ssl_ca_bundle > ssl_cert_dir > True
        """
        if not self.ssl_verify:
            return False
        if self.ssl_ca_bundle:
            return self.ssl_ca_bundle
        if self.ssl_cert_dir:
            return self.ssl_cert_dir
        return True


# Global settings instance
settings = Settings()
