"""Черновик профиля, который заполняет мастер онбординга."""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from onboarding.models.profile import (
    ActivityLevel,
    DietPreference,
    Goal,
    GoalIntensity,
    HeightUnit,
    MacrosSetup,
    Purpose,
    Sex,
    WeightUnit,
)

# Варианты аллергий, которые предлагает шаг "any allergies?"
ALLERGY_OPTIONS = ("nuts", "lactose", "gluten", "shellfish", "eggs", "soy")


@dataclass
class UnitPreference:
    weight: WeightUnit = WeightUnit.KG
    height: HeightUnit = HeightUnit.CM


@dataclass
class CustomMacros:
    """Ручные БЖУ в граммах. None — поле ещё не заполнено."""

    protein: Optional[int] = None
    carbs: Optional[int] = None
    fats: Optional[int] = None

    def is_complete(self) -> bool:
        return all((self.protein, self.carbs, self.fats))


@dataclass
class ProfileDraft:
    """Изменяемый черновик профиля на время сессии мастера.

    None в полях-перечислениях означает "не выбрано", 0 в полях даты
    рождения — "не указано". Рост и вес всегда в единицах
    height_unit / weight_unit (рост в футах хранится в дюймах).
    """

    name: str = ""
    birth_month: int = 0
    birth_day: int = 0
    birth_year: int = 0
    sex: Optional[Sex] = None
    height: float = 170
    height_unit: HeightUnit = HeightUnit.CM
    weight: float = 70
    weight_unit: WeightUnit = WeightUnit.KG
    goal: Optional[Goal] = None
    activity_level: Optional[ActivityLevel] = None
    diet_preference: Optional[DietPreference] = None
    allergies: set = field(default_factory=set)
    goal_intensity: Optional[GoalIntensity] = None
    unit_preference: UnitPreference = field(default_factory=UnitPreference)
    purpose: Optional[Purpose] = None
    macros_setup: Optional[MacrosSetup] = None
    custom_macros: Optional[CustomMacros] = None

    @property
    def birth_date(self) -> Optional[date]:
        """Дата рождения или None, если не заполнена / некорректна."""
        if not (self.birth_month and self.birth_day and self.birth_year):
            return None
        try:
            return date(self.birth_year, self.birth_month, self.birth_day)
        except ValueError:
            return None

    def snapshot(self) -> "ProfileDraft":
        """Независимая копия для презентационного слоя."""
        return copy.deepcopy(self)
