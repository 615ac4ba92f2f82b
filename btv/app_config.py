from pydantic import BaseModel

from btv.config import config


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class AppEnvironConfig(BaseModel):
    DEBUG: bool = config.get_bool("DEBUG")

    API_HOST: str = config.get("API_HOST", "0.0.0.0").strip()
    API_PORT: int = config.get_int("API_PORT", 8000)
    API_WORKERS: int = config.get_int("API_WORKERS", 1)
    API_CORS_ORIGINS: list[str] = _split_csv(config.get("API_CORS_ORIGINS", "*"))

    # Hosted backend (PostgREST / storage / auth)
    SUPABASE_URL: str = config.get("SUPABASE_URL", "").strip().rstrip("/")
    SUPABASE_ANON_KEY: str | None = (config.get("SUPABASE_ANON_KEY") or "").strip() or None
    SUPABASE_SERVICE_ROLE_KEY: str | None = (
        config.get("SUPABASE_SERVICE_ROLE_KEY") or ""
    ).strip() or None
    GATEWAY_TIMEOUT_SECONDS: int = config.get_int("GATEWAY_TIMEOUT_SECONDS", 15)

    # Channel gating
    PROTECTED_CHANNEL_KEYS: list[str] = _split_csv(config.get("PROTECTED_CHANNEL_KEYS"))
    CHANNEL_COOKIE_SECURE: bool = config.get_bool("CHANNEL_COOKIE_SECURE", True)

    # Object storage
    SIGNED_URL_DEFAULT_EXPIRES: int = config.get_int("SIGNED_URL_DEFAULT_EXPIRES", 6 * 60 * 60)


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
