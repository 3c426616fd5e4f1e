from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SESSION_SECRET = "dev-change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    app_version: str = "0.1.0"
    database_url: str = "sqlite:///./rentbook.db"

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Sessions ----
    session_secret: str = DEFAULT_SESSION_SECRET
    session_cookie_name: str = "session-token"
    session_ttl_days: int = 7
    session_cookie_secure: int = 0
    session_cookie_samesite: str = "lax"

    password_pbkdf2_iters: int = 210_000

    # ---- Valuation defaults (PropertySettings fallback) ----
    default_gross_rent_multiplier: float = 12.0
    default_operating_expense_ratio: float = 25.0  # percent
    default_value_adjustment: float = 0.0  # percent
    default_property_appreciation: float = 2.0  # percent per year
    default_etf_return: float = 7.0  # percent per year
    default_comparison_years: int = 10

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if self.session_secret == DEFAULT_SESSION_SECRET:
                raise ValueError("SECURITY: session_secret must be set in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
