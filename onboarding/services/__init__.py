"""Сервисы: ядро мастера онбординга и хранение профиля."""
from onboarding.services.units import cm_to_inches, inches_to_cm, kg_to_lbs, lbs_to_kg
from onboarding.services.validation import SessionState, StepResult, validate
from onboarding.services.nutrition_calc import MacroTarget, compute_auto, compute_manual
from onboarding.services.steps import STANDARD_FLOW, LEGACY_FLOW, get_flow
from onboarding.services.wizard import OnboardingWizard, OnboardingResult

__all__ = [
    "cm_to_inches",
    "inches_to_cm",
    "kg_to_lbs",
    "lbs_to_kg",
    "SessionState",
    "StepResult",
    "validate",
    "MacroTarget",
    "compute_auto",
    "compute_manual",
    "STANDARD_FLOW",
    "LEGACY_FLOW",
    "get_flow",
    "OnboardingWizard",
    "OnboardingResult",
]
