"""Клавиатуры шагов онбординга."""
from telegram import InlineKeyboardButton, InlineKeyboardMarkup
from onboarding.models import HeightUnit, MacrosSetup, WeightUnit
from onboarding.services.validation import StepId
from onboarding.services.wizard import OnboardingWizard


def _mark(label: str, selected: bool) -> str:
    return f"✅ {label}" if selected else label


def _unit_row(dimension: str, units, current) -> list:
    return [
        InlineKeyboardButton(
            _mark(unit.value, unit == current), callback_data=f"ob:unit:{dimension}:{unit.value}"
        )
        for unit in units
    ]


def get_navigation_row(wizard: OnboardingWizard) -> list:
    """Кнопки "назад" и "продолжить" с прогрессом."""
    if wizard.step == 1:
        title = "get started!"
    elif wizard.is_last_step:
        title = "let's go!"
    else:
        title = f"continue ({wizard.step}/{wizard.total_steps})"

    row = []
    if wizard.step > 1:
        row.append(InlineKeyboardButton("◀️ back", callback_data="ob:back"))
    row.append(InlineKeyboardButton(title, callback_data="ob:next"))
    return row


def get_step_keyboard(wizard: OnboardingWizard) -> InlineKeyboardMarkup:
    """Кнопки для текущего шага мастера.

    Args:
        wizard: мастер в текущем состоянии
    """
    step = wizard.current_step
    draft = wizard.draft
    keyboard = []

    if step.id == StepId.ALLERGIES:
        keyboard = [
            [InlineKeyboardButton(_mark(label, value in draft.allergies), callback_data=f"ob:allergy:{value}")]
            for value, label in step.options
        ]
    elif step.options:
        current = getattr(draft, step.field)
        keyboard = [
            [
                InlineKeyboardButton(
                    _mark(label, value == current), callback_data=f"ob:set:{step.field}:{value.value}"
                )
            ]
            for value, label in step.options
        ]
    elif step.id == StepId.UNIT_PREFERENCE:
        keyboard = [
            _unit_row("weight", WeightUnit, draft.unit_preference.weight),
            _unit_row("height", HeightUnit, draft.unit_preference.height),
        ]
    elif step.id == StepId.HEIGHT:
        keyboard = [_unit_row("height", HeightUnit, draft.height_unit)]
    elif step.id == StepId.WEIGHT:
        keyboard = [_unit_row("weight", WeightUnit, draft.weight_unit)]
    elif step.id == StepId.MACROS_SETUP:
        keyboard = [
            [
                InlineKeyboardButton(
                    _mark(mode.value, mode == draft.macros_setup), callback_data=f"ob:macros:{mode.value}"
                )
                for mode in MacrosSetup
            ]
        ]

    keyboard.append(get_navigation_row(wizard))
    return InlineKeyboardMarkup(keyboard)
