from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def _default_env_file() -> str:
    repo_root = Path(__file__).resolve().parents[1]
    return str(repo_root / ".env")


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    tick_seconds: float
    log_feed_size: int
    random_seed: Optional[int]

    notifications_enabled: bool
    notify_timeout_seconds: float

    emailjs_service_id: str
    emailjs_template_id: str
    emailjs_public_key: str
    technician_email: str

    twilio_account_sid: str
    twilio_auth_token: str
    twilio_whatsapp_from: str
    technician_whatsapp: str


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("SIM_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    seed_raw = os.getenv("SIM_RANDOM_SEED", "").strip()

    return Settings(
        tick_seconds=float(os.getenv("SIM_TICK_SECONDS", "5.0")),
        log_feed_size=int(os.getenv("SIM_LOG_FEED_SIZE", "50")),
        random_seed=int(seed_raw) if seed_raw else None,
        notifications_enabled=_env_bool("SIM_NOTIFICATIONS_ENABLED"),
        notify_timeout_seconds=float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "5")),
        emailjs_service_id=os.getenv("EMAILJS_SERVICE_ID", ""),
        emailjs_template_id=os.getenv("EMAILJS_TEMPLATE_ID", ""),
        emailjs_public_key=os.getenv("EMAILJS_PUBLIC_KEY", ""),
        technician_email=os.getenv("TECHNICIAN_EMAIL", ""),
        twilio_account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
        twilio_auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
        twilio_whatsapp_from=os.getenv("TWILIO_WHATSAPP_FROM", ""),
        technician_whatsapp=os.getenv("TECHNICIAN_WHATSAPP", ""),
    )
