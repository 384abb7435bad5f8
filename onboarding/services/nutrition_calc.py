"""Расчёт дневной нормы калорий и БЖУ по данным онбординга."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Optional

from onboarding.models.draft import CustomMacros, ProfileDraft
from onboarding.models.profile import (
    ActivityLevel,
    Goal,
    GoalIntensity,
    HeightUnit,
    MacrosSetup,
    Sex,
    WeightUnit,
)
from onboarding.services.units import height_to_cm, round_half_up, weight_to_kg
from onboarding.services.validation import calculate_age

# ккал на грамм
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9

# Верхняя граница ручного ввода, г
MAX_MANUAL_GRAMS = 500

ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY: 1.375,
    ActivityLevel.MODERATE: 1.55,
    ActivityLevel.VERY: 1.725,
}

# Похудение — доля от TDEE, набор — прибавка в ккал
LOSE_FACTORS = {
    GoalIntensity.MILD: 0.90,
    GoalIntensity.MODERATE: 0.80,
    GoalIntensity.AGGRESSIVE: 0.75,
}
BUILD_SURPLUS = {
    GoalIntensity.MILD: 200,
    GoalIntensity.MODERATE: 350,
    GoalIntensity.AGGRESSIVE: 500,
}

# Минимум калорий при похудении
MIN_CALORIES_MALE = 1500
MIN_CALORIES_OTHER = 1200

PROTEIN_G_PER_KG = 2.0
FAT_SHARE = 0.25


@dataclass(frozen=True)
class MacroTarget:
    """Дневная цель: калории и БЖУ в граммах."""

    calories: int
    protein: int
    carbs: int
    fats: int
    base_tdee: Optional[int] = None  # поддержание, только для авторасчёта

    def as_dict(self) -> dict:
        return {key: value for key, value in asdict(self).items() if value is not None}


def calculate_bmr(weight_kg: float, height_cm: float, age: int, sex: Sex) -> float:
    """Базовый метаболизм по Mifflin-St Jeor.

    Для Sex.OTHER используется женская поправка.
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if sex == Sex.MALE else base - 161


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]


def calculate_target_calories(tdee: float, goal: Goal, goal_intensity: GoalIntensity, sex: Sex) -> int:
    """Калории под цель; при похудении не ниже безопасного минимума."""
    if goal == Goal.LOSE:
        calories = int(round_half_up(tdee * LOSE_FACTORS[goal_intensity]))
        floor = MIN_CALORIES_MALE if sex == Sex.MALE else MIN_CALORIES_OTHER
        return max(floor, calories)
    if goal == Goal.BUILD:
        return int(round_half_up(tdee + BUILD_SURPLUS[goal_intensity]))
    return int(round_half_up(tdee))


def split_macros(calories: int, weight_kg: float) -> dict:
    """Белок 2 г/кг, жиры 25% калорий, углеводы — остаток."""
    protein = int(round_half_up(weight_kg * PROTEIN_G_PER_KG))
    fat_calories = round_half_up(calories * FAT_SHARE)
    fats = int(round_half_up(fat_calories / KCAL_PER_G_FAT))
    carb_calories = calories - protein * KCAL_PER_G_PROTEIN - fats * KCAL_PER_G_FAT
    carbs = int(round_half_up(carb_calories / KCAL_PER_G_CARBS))
    return {"protein": protein, "carbs": max(0, carbs), "fats": fats}


def calories_from_macros(protein: float, carbs: float, fats: float) -> int:
    return int(
        round_half_up(
            protein * KCAL_PER_G_PROTEIN + carbs * KCAL_PER_G_CARBS + fats * KCAL_PER_G_FAT
        )
    )


def compute_auto(
    age: int,
    sex: Sex,
    height: float,
    height_unit: HeightUnit,
    weight: float,
    weight_unit: WeightUnit,
    activity_level: ActivityLevel,
    goal: Goal,
    goal_intensity: GoalIntensity,
) -> MacroTarget:
    """Рассчитать дневные нормы автоматически.

    BMR (Mifflin-St Jeor) -> TDEE (коэффициент активности) -> корректировка
    под цель -> БЖУ. Входные данные уже проверены валидатором.
    """
    height_cm = height_to_cm(height, height_unit)
    weight_kg = weight_to_kg(weight, weight_unit)

    bmr = calculate_bmr(weight_kg, height_cm, age, sex)
    tdee = calculate_tdee(bmr, activity_level)
    calories = calculate_target_calories(tdee, goal, goal_intensity, sex)

    return MacroTarget(
        calories=calories,
        base_tdee=int(round_half_up(tdee)),
        **split_macros(calories, weight_kg),
    )


def clamp_manual_grams(value: Optional[float]) -> Optional[int]:
    """Граммы ручного ввода в 0..500; None (не заполнено) остаётся None."""
    if value is None:
        return None
    return max(0, min(MAX_MANUAL_GRAMS, int(round_half_up(value))))


def compute_manual(custom_macros: CustomMacros) -> MacroTarget:
    """Ручные БЖУ: граммы зажимаются в 0..500, калории пересчитываются."""
    grams = {
        key: clamp_manual_grams(getattr(custom_macros, key)) or 0
        for key in ("protein", "carbs", "fats")
    }
    return MacroTarget(calories=calories_from_macros(**grams), **grams)


def compute_target(draft: ProfileDraft, today: Optional[date] = None) -> MacroTarget:
    """Норма для проверенного черновика в зависимости от macros_setup."""
    if draft.macros_setup == MacrosSetup.MANUAL:
        return compute_manual(draft.custom_macros)

    age = calculate_age(draft.birth_year, draft.birth_month, draft.birth_day, today)
    return compute_auto(
        age,
        draft.sex,
        draft.height,
        draft.height_unit,
        draft.weight,
        draft.weight_unit,
        draft.activity_level,
        draft.goal,
        draft.goal_intensity,
    )


def describe_target(target: MacroTarget) -> Optional[str]:
    """Сравнение с поддержанием для экрана результатов."""
    if target.base_tdee is None:
        return None
    difference = target.calories - target.base_tdee
    if difference < 0:
        return f"{abs(difference)} calories less than your maintenance of {target.base_tdee}"
    if difference > 0:
        return f"{difference} calories more than your maintenance of {target.base_tdee}"
    return f"right at your maintenance of {target.base_tdee}"
