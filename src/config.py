"""Centralised application settings loaded from environment / .env file."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Persistence (snapshot blobs)
    database_url: str = "sqlite+aiosqlite:///./school_transport.db"

    # Redis -- empty string runs the tracking loop without a cross-process lock
    redis_url: str = "redis://localhost:6379/0"

    # Tracking simulator
    tracking_interval_seconds: float = 5.0
    tracking_loss_probability: float = 0.02  # per tick
    jitter_magnitude: float = 0.0005  # degrees
    jitter_bias: float = 0.6  # (u - bias) * magnitude, mean -0.1 * magnitude

    # Dispatch
    operator_eta_minutes: int = 15
    auto_match_eta_minutes: int = 12
    driver_selection: str = "random"  # "random" | "nearest"
    h3_resolution: int = 8

    # Boarding verification
    pin_max_attempts: int = 5  # 0 disables the lockout

    # Advisory service (optional)
    advisory_url: Optional[str] = None
    advisory_api_key: Optional[str] = None
    advisory_timeout_seconds: float = 4.0

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = False
    log_level: str = "INFO"

    # Runtime
    random_seed: Optional[int] = None
    seed_demo_data: bool = True
    rate_limit: str = "100/minute"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
