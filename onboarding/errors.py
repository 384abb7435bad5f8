"""Исключения мастера онбординга.

Ни одно из них не должно завершать процесс: обработчики показывают
сообщение пользователю и оставляют мастер интерактивным.
"""


class OnboardingError(Exception):
    """Базовая ошибка онбординга."""


class StepValidationError(OnboardingError):
    """Шаг не прошёл проверку (например, финальный шаг при complete())."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class WizardStateError(OnboardingError):
    """Операция недоступна в текущем состоянии мастера."""


class CompletionInProgressError(WizardStateError):
    """Сохранение уже выполняется (повторное нажатие)."""


class CompletionError(OnboardingError):
    """Не удалось сохранить профиль. Черновик сохранён, можно повторить."""
