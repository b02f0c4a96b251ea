from typing import Literal

from pydantic_settings import BaseSettings

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    cache_ttl_seconds: float = 6 * 60 * 60
    cache_sweep_interval_seconds: float = 60 * 60

    fetch_strategy: Literal["static", "rendered"] = "static"
    profile_base_url: str = "https://zalo.me"
    brand_name: str = "Zalo"
    country_prefix: str = "+84"
    local_prefix: str = "0"
    user_agent: str = _DEFAULT_USER_AGENT

    fetch_timeout_seconds: float = 10.0
    render_timeout_seconds: float = 15.0
    render_settle_seconds: float = 4.0

    not_found_phrases: list[str] = [
        "Tài khoản này không tồn tại",
        "không cho phép tìm kiếm",
    ]
    name_selectors: list[str] = [
        "h1.main__name",
        ".main__name",
        'h1[class*="name"]',
        '[class*="card-name"]',
    ]

    debug_preview_chars: int = 5000
