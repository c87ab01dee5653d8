# src/habittrack/storage/app_settings.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..tasks.task_models import AppTheme
from .gateway import PersistenceGateway

logger = logging.getLogger(__name__)

THEME_KEY = "app_theme"
ONBOARDING_KEY = "has_seen_onboarding"


@dataclass(frozen=True, slots=True)
class AppSettings:
    theme: AppTheme = AppTheme.LIGHT
    onboarding_seen: bool = False


def load_app_settings(gateway: PersistenceGateway) -> AppSettings:
    theme = AppTheme.from_raw(gateway.load_setting(THEME_KEY, AppTheme.LIGHT.value))
    seen = bool(gateway.load_setting(ONBOARDING_KEY, False))
    return AppSettings(theme=theme, onboarding_seen=seen)


def save_theme(gateway: PersistenceGateway, theme: AppTheme) -> AppTheme:
    gateway.save_setting(THEME_KEY, theme.value)
    logger.info("Theme set to %s", theme.value)
    return theme


def mark_onboarding_seen(gateway: PersistenceGateway) -> None:
    """One-way flag: once set it is never cleared."""
    if gateway.load_setting(ONBOARDING_KEY, False):
        return
    gateway.save_setting(ONBOARDING_KEY, True)
    logger.info("Onboarding marked as seen")
