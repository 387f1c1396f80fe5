from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (Postgres behind the data service in production)
    promptek_db_url: str = "sqlite+aiosqlite:///data/promptek.db"
    promptek_db_create_tables: bool = False

    # Logging
    promptek_log_level: str = "info"

    # CORS
    promptek_cors_allow_origin: str = "*"
    promptek_cors_allow_headers: str = "authorization, x-client-info, apikey, content-type"

    # Email
    resend_api_key: str | None = None  # None = log emails instead of sending
    resend_base_url: str = "https://api.resend.com"
    promptek_verification_sender: str = "PrompTek <noreply@promptekai.com>"
    promptek_notification_sender: str = "PrompTek <onboarding@resend.dev>"
    promptek_app_url: str = "https://promptekai.com"

    # HTTP client timeouts (seconds)
    promptek_http_connect_timeout: float = 5.0
    promptek_http_read_timeout: float = 30.0

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
