"""Configuration helpers for the onboarding bot runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from onboarding_bot.errors import ConfigurationError
from onboarding_bot.models import OnboardingSettings

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

REQUIRED_VARS = ("BOT_TOKEN", "CLIENT_ID", "GUILD_ID")

_DEFAULTS = OnboardingSettings()


def env_bool(name: str, *, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_float(name: str, *, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def env_str(name: str, *, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw


@dataclass(frozen=True)
class ShadowConfig:
    enabled: bool
    channel_id: int | None


def read_shadow_config(*, default_enabled: bool = False) -> ShadowConfig:
    return ShadowConfig(
        enabled=env_bool("SHADOW_MODE", default=default_enabled),
        channel_id=env_int("SHADOW_CHANNEL_ID"),
    )


@dataclass(frozen=True)
class BotConfig:
    token: str
    application_id: int
    guild_id: int
    settings: OnboardingSettings
    shadow: ShadowConfig
    log_level: str = "INFO"

    @classmethod
    def load(cls, env_file: str | None = ".env") -> BotConfig:
        """Read configuration from the environment.

        A ``.env`` file, when present, is loaded first without overriding
        variables that are already set.
        """
        if env_file and Path(env_file).exists():
            load_dotenv(env_file)

        missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
        if missing:
            raise ConfigurationError(f"Missing env vars: {', '.join(missing)}")

        application_id = env_int("CLIENT_ID")
        guild_id = env_int("GUILD_ID")
        invalid = [
            name
            for name, value in (("CLIENT_ID", application_id), ("GUILD_ID", guild_id))
            if value is None
        ]
        if invalid:
            raise ConfigurationError(f"Env vars must be numeric ids: {', '.join(invalid)}")

        settings = OnboardingSettings(
            notification_channel=env_str(
                "NOTIFICATION_CHANNEL_NAME", default=_DEFAULTS.notification_channel
            ),
            verification_channel=env_str(
                "VERIFICATION_CHANNEL_NAME", default=_DEFAULTS.verification_channel
            ),
            verified_role_name=env_str(
                "VERIFIED_ROLE_NAME", default=_DEFAULTS.verified_role_name
            ),
            grade_role_template=env_str(
                "GRADE_ROLE_TEMPLATE", default=_DEFAULTS.grade_role_template
            ),
            cleanup_delay=env_float(
                "CLEANUP_DELAY_SECONDS", default=_DEFAULTS.cleanup_delay
            ),
        )
        if "{class_id}" not in settings.grade_role_template:
            raise ConfigurationError("GRADE_ROLE_TEMPLATE must contain {class_id}")

        return cls(
            token=os.environ["BOT_TOKEN"],
            application_id=application_id,
            guild_id=guild_id,
            settings=settings,
            shadow=read_shadow_config(default_enabled=False),
            log_level=env_str("LOG_LEVEL", default="INFO").upper(),
        )
