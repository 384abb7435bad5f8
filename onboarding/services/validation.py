"""Проверка шагов мастера онбординга.

Каждый валидатор — чистая функция (draft, session, today) -> StepResult.
Черновик только читается. Какой валидатор у какого номера шага,
решает конфигурация шагов (services/steps.py).
"""
from __future__ import annotations

import calendar
import enum
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from onboarding.models.draft import ProfileDraft
from onboarding.models.profile import MacrosSetup

MIN_AGE = 13
MAX_AGE = 120
MIN_USERNAME_LENGTH = 3

MSG_CHECKING_USERNAME = "checking username availability..."
MSG_USERNAME_TOO_SHORT = "username must be at least 3 characters"
MSG_USERNAME_TAKEN = "this username is already taken"


class StepId(str, enum.Enum):
    """Идентификаторы шагов (порядок задаёт конфигурация flow)."""
    WELCOME = "welcome"
    NAME = "name"
    BIRTHDATE = "birthdate"
    SEX = "sex"
    UNIT_PREFERENCE = "unit_preference"
    HEIGHT = "height"
    WEIGHT = "weight"
    GOAL = "goal"
    ACTIVITY_LEVEL = "activity_level"
    DIET_PREFERENCE = "diet_preference"
    ALLERGIES = "allergies"
    GOAL_INTENSITY = "goal_intensity"
    PURPOSE = "purpose"
    MACROS_SETUP = "macros_setup"


@dataclass(frozen=True)
class StepResult:
    valid: bool
    message: Optional[str] = None


VALID = StepResult(True)


@dataclass
class SessionState:
    """Флаги сессии, которые живут вне черновика.

    username_error и checking_username выставляет проверка уникальности
    username, saving — complete() на время сохранения.
    """

    username_error: str = ""
    checking_username: bool = False
    saving: bool = False


def _invalid(message: str) -> StepResult:
    return StepResult(False, message)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def calculate_age(birth_year: int, birth_month: int, birth_day: int, today: Optional[date] = None) -> int:
    """Полных лет: разница годов минус 1, если день рождения ещё не наступил."""
    today = today or date.today()
    age = today.year - birth_year
    if today.month < birth_month or (today.month == birth_month and today.day < birth_day):
        age -= 1
    return age


def validate_welcome(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    return VALID


def validate_name(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    name = (draft.name or "").strip()
    if not name:
        return _invalid("please enter your username")
    if len(name) < MIN_USERNAME_LENGTH:
        return _invalid(MSG_USERNAME_TOO_SHORT)
    if session.username_error:
        return _invalid(session.username_error)
    if session.checking_username:
        return _invalid(MSG_CHECKING_USERNAME)
    return VALID


def validate_birthdate(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if not (draft.birth_month and draft.birth_day and draft.birth_year):
        return _invalid("please select your birthdate")
    if not 1 <= draft.birth_month <= 12 or draft.birth_year < 1:
        return _invalid("invalid date")
    if not 1 <= draft.birth_day <= days_in_month(draft.birth_year, draft.birth_month):
        return _invalid("invalid date")

    age = calculate_age(draft.birth_year, draft.birth_month, draft.birth_day, today)
    if age < MIN_AGE:
        return _invalid("you must be at least 13 years old")
    if age > MAX_AGE:
        return _invalid("please enter a valid birthdate")
    return VALID


def validate_sex(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.sex is None:
        return _invalid("please select your sex")
    return VALID


def validate_unit_preference(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    prefs = draft.unit_preference
    if prefs is None or not prefs.weight or not prefs.height:
        return _invalid("please select unit preferences")
    return VALID


def validate_height(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if not draft.height or draft.height <= 0:
        return _invalid("please enter your height")
    return VALID


def validate_weight(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if not draft.weight or draft.weight <= 0:
        return _invalid("please enter your weight")
    return VALID


def validate_goal(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.goal is None:
        return _invalid("please select your goal")
    return VALID


def validate_activity_level(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.activity_level is None:
        return _invalid("please select your activity level")
    return VALID


def validate_diet_preference(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.diet_preference is None:
        return _invalid("please select your diet preference")
    return VALID


def validate_allergies(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    # Необязательный шаг: пустой набор допустим
    return VALID


def validate_goal_intensity(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.goal_intensity is None:
        return _invalid("please select goal intensity")
    return VALID


def validate_purpose(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.purpose is None:
        return _invalid("please select what you're here for")
    return VALID


def validate_macros_setup(draft: ProfileDraft, session: SessionState, today: date) -> StepResult:
    if draft.macros_setup is None:
        return _invalid("please select macros setup")
    if draft.macros_setup == MacrosSetup.MANUAL and (
        draft.custom_macros is None or not draft.custom_macros.is_complete()
    ):
        return _invalid("please enter all macro values")
    return VALID


Validator = Callable[[ProfileDraft, SessionState, date], StepResult]

VALIDATORS: dict[StepId, Validator] = {
    StepId.WELCOME: validate_welcome,
    StepId.NAME: validate_name,
    StepId.BIRTHDATE: validate_birthdate,
    StepId.SEX: validate_sex,
    StepId.UNIT_PREFERENCE: validate_unit_preference,
    StepId.HEIGHT: validate_height,
    StepId.WEIGHT: validate_weight,
    StepId.GOAL: validate_goal,
    StepId.ACTIVITY_LEVEL: validate_activity_level,
    StepId.DIET_PREFERENCE: validate_diet_preference,
    StepId.ALLERGIES: validate_allergies,
    StepId.GOAL_INTENSITY: validate_goal_intensity,
    StepId.PURPOSE: validate_purpose,
    StepId.MACROS_SETUP: validate_macros_setup,
}


def validate(
    step: int,
    draft: ProfileDraft,
    session: SessionState,
    flow,
    today: Optional[date] = None,
) -> StepResult:
    """Проверить шаг step (нумерация с 1) конфигурации flow.

    Raises:
        IndexError: шага с таким номером нет в flow
    """
    if not 1 <= step <= len(flow.steps):
        raise IndexError(f"Шаг {step} вне диапазона 1..{len(flow.steps)}")
    descriptor = flow.steps[step - 1]
    return descriptor.validator(draft, session, today or date.today())
