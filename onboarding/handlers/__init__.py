"""Обработчики команд бота."""
from onboarding.handlers.start import register_handlers as register_start_handlers
from onboarding.handlers.onboarding import register_handlers as register_onboarding_handlers

__all__ = [
    "register_start_handlers",
    "register_onboarding_handlers",
]
