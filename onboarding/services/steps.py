"""Декларативные конфигурации шагов онбординга.

Порядок шагов — упорядоченный список дескрипторов, а не switch по номеру:
вставка или перестановка шага не ломает валидацию.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from onboarding.models.draft import ALLERGY_OPTIONS
from onboarding.models.profile import (
    ActivityLevel,
    DietPreference,
    Goal,
    GoalIntensity,
    Purpose,
    Sex,
)
from onboarding.services.validation import VALIDATORS, StepId, Validator


@dataclass(frozen=True)
class StepDescriptor:
    """Один шаг мастера."""

    id: StepId
    title: str
    field: Optional[str] = None  # поле черновика, которое заполняет шаг
    options: tuple = ()  # (значение, подпись) для шагов с выбором
    optional: bool = False
    text_input: bool = False  # шаг ждёт текстовый ввод

    @property
    def validator(self) -> Validator:
        return VALIDATORS[self.id]


@dataclass(frozen=True)
class Flow:
    """Конфигурация мастера: порядок шагов и значения по умолчанию."""

    name: str
    steps: tuple
    default_height: float = 170
    default_weight: float = 70
    show_results: bool = False

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def index_of(self, step_id: StepId) -> int:
        """Номер шага (с 1) по идентификатору."""
        for number, descriptor in enumerate(self.steps, start=1):
            if descriptor.id == step_id:
                return number
        raise KeyError(step_id)


WELCOME = StepDescriptor(StepId.WELCOME, "welcome! let's set up your profile")
NAME = StepDescriptor(StepId.NAME, "what's your username?", field="name", text_input=True)
BIRTHDATE = StepDescriptor(
    StepId.BIRTHDATE, "when's your birthday? (dd.mm.yyyy)", field="birth_date", text_input=True
)
SEX = StepDescriptor(
    StepId.SEX,
    "what's your sex?",
    field="sex",
    options=((Sex.MALE, "male"), (Sex.FEMALE, "female"), (Sex.OTHER, "other")),
)
UNIT_PREFERENCE = StepDescriptor(StepId.UNIT_PREFERENCE, "unit preferences", field="unit_preference")
HEIGHT = StepDescriptor(StepId.HEIGHT, "what's your height?", field="height", text_input=True)
WEIGHT = StepDescriptor(StepId.WEIGHT, "what's your weight?", field="weight", text_input=True)
GOAL = StepDescriptor(
    StepId.GOAL,
    "what's your goal?",
    field="goal",
    options=((Goal.LOSE, "lose weight"), (Goal.MAINTAIN, "maintain"), (Goal.BUILD, "build muscle")),
)
ACTIVITY_LEVEL = StepDescriptor(
    StepId.ACTIVITY_LEVEL,
    "how active are you?",
    field="activity_level",
    options=(
        (ActivityLevel.SEDENTARY, "sedentary (little to no exercise)"),
        (ActivityLevel.LIGHTLY, "lightly active (1-3 days/week)"),
        (ActivityLevel.MODERATE, "moderately active (3-5 days/week)"),
        (ActivityLevel.VERY, "very active (6-7 days/week)"),
    ),
)
DIET_PREFERENCE = StepDescriptor(
    StepId.DIET_PREFERENCE,
    "any diet preference?",
    field="diet_preference",
    options=(
        (DietPreference.REGULAR, "regular"),
        (DietPreference.HIGH_PROTEIN, "high protein"),
        (DietPreference.VEGETARIAN, "vegetarian"),
        (DietPreference.VEGAN, "vegan"),
        (DietPreference.KETO, "keto"),
        (DietPreference.HALAL, "halal / no pork"),
    ),
)
ALLERGIES = StepDescriptor(
    StepId.ALLERGIES,
    "any allergies?",
    field="allergies",
    options=tuple((name, name) for name in ALLERGY_OPTIONS),
    optional=True,
)
GOAL_INTENSITY = StepDescriptor(
    StepId.GOAL_INTENSITY,
    "how fast do you want to get there?",
    field="goal_intensity",
    options=(
        (GoalIntensity.MILD, "mild (slow & steady)"),
        (GoalIntensity.MODERATE, "moderate (balanced approach)"),
        (GoalIntensity.AGGRESSIVE, "aggressive (fast results)"),
    ),
)
PURPOSE = StepDescriptor(
    StepId.PURPOSE,
    "what are you here for?",
    field="purpose",
    options=(
        (Purpose.MEALS, "track my meals"),
        (Purpose.WORKOUTS, "track my workouts"),
        (Purpose.BOTH, "track both"),
        (Purpose.DISCIPLINE, "build discipline"),
    ),
)
MACROS_SETUP = StepDescriptor(
    StepId.MACROS_SETUP, "how should we set your macros?", field="macros_setup", text_input=True
)

STANDARD_FLOW = Flow(
    name="standard",
    steps=(
        WELCOME,
        NAME,
        BIRTHDATE,
        SEX,
        UNIT_PREFERENCE,
        HEIGHT,
        WEIGHT,
        GOAL,
        ACTIVITY_LEVEL,
        DIET_PREFERENCE,
        ALLERGIES,
        GOAL_INTENSITY,
        PURPOSE,
        MACROS_SETUP,
    ),
)

# Порядок экранов мобильного приложения: единицы после интенсивности,
# после завершения показывается экран результатов
LEGACY_FLOW = Flow(
    name="legacy",
    steps=(
        WELCOME,
        NAME,
        BIRTHDATE,
        SEX,
        HEIGHT,
        WEIGHT,
        GOAL,
        ACTIVITY_LEVEL,
        DIET_PREFERENCE,
        ALLERGIES,
        GOAL_INTENSITY,
        UNIT_PREFERENCE,
        PURPOSE,
        MACROS_SETUP,
    ),
    show_results=True,
)

FLOWS = {flow.name: flow for flow in (STANDARD_FLOW, LEGACY_FLOW)}


def get_flow(name: str) -> Flow:
    """Конфигурация по имени (ONBOARDING_FLOW)."""
    try:
        return FLOWS[name]
    except KeyError:
        raise ValueError(f"Неизвестная конфигурация онбординга: {name}") from None
