"""Модели: перечисления, черновик онбординга и таблицы БД."""
from onboarding.models.base import BaseModel, TimestampMixin
from onboarding.models.user import User
from onboarding.models.profile import (
    Profile,
    Sex,
    HeightUnit,
    WeightUnit,
    Goal,
    ActivityLevel,
    DietPreference,
    GoalIntensity,
    Purpose,
    MacrosSetup,
)
from onboarding.models.draft import ProfileDraft, UnitPreference, CustomMacros, ALLERGY_OPTIONS

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "User",
    "Profile",
    "Sex",
    "HeightUnit",
    "WeightUnit",
    "Goal",
    "ActivityLevel",
    "DietPreference",
    "GoalIntensity",
    "Purpose",
    "MacrosSetup",
    "ProfileDraft",
    "UnitPreference",
    "CustomMacros",
    "ALLERGY_OPTIONS",
]
