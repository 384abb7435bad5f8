"""Мастер онбординга: шаги, черновик профиля и завершение.

Все переходы синхронны и вызываются из одного потока событий UI.
Асинхронная только проверка username (services/username_check.py).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from onboarding.errors import (
    CompletionError,
    CompletionInProgressError,
    StepValidationError,
    WizardStateError,
)
from onboarding.models.draft import ALLERGY_OPTIONS, CustomMacros, ProfileDraft, UnitPreference
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
from onboarding.services.nutrition_calc import MacroTarget, clamp_manual_grams, compute_target
from onboarding.services.steps import STANDARD_FLOW, Flow, StepDescriptor
from onboarding.services.units import convert_height, convert_weight, snap_height, snap_weight
from onboarding.services.username_check import UsernameCheck
from onboarding.services.validation import SessionState, StepResult, calculate_age, validate

logger = logging.getLogger(__name__)

ENUM_FIELDS = {
    "sex": Sex,
    "goal": Goal,
    "activity_level": ActivityLevel,
    "diet_preference": DietPreference,
    "goal_intensity": GoalIntensity,
    "purpose": Purpose,
}
INT_FIELDS = ("birth_month", "birth_day", "birth_year")


@dataclass(frozen=True)
class OnboardingResult:
    """Завершённый профиль, который передаётся на сохранение."""

    draft: ProfileDraft
    target: MacroTarget
    age: int

    def as_record(self) -> dict:
        """Стабильная схема для хранилища."""
        draft = self.draft
        record = {
            "name": draft.name.strip(),
            "birth_date": draft.birth_date.isoformat(),
            "age": self.age,
            "sex": draft.sex.value,
            "height": draft.height,
            "height_unit": draft.height_unit.value,
            "weight": draft.weight,
            "weight_unit": draft.weight_unit.value,
            "goal": draft.goal.value,
            "activity_level": draft.activity_level.value,
            "diet_preference": draft.diet_preference.value,
            "allergies": sorted(draft.allergies),
            "goal_intensity": draft.goal_intensity.value,
            "unit_preference": {
                "weight": draft.unit_preference.weight.value,
                "height": draft.unit_preference.height.value,
            },
            "purpose": draft.purpose.value,
            "macros_setup": draft.macros_setup.value,
            "target_macros": self.target.as_dict(),
        }
        if draft.custom_macros is not None:
            record["custom_macros"] = {
                "protein": draft.custom_macros.protein,
                "carbs": draft.custom_macros.carbs,
                "fats": draft.custom_macros.fats,
            }
        return record


class OnboardingWizard:
    """Конечный автомат шагов онбординга.

    Args:
        flow: конфигурация шагов
        persist: сохраняет OnboardingResult, исключение = неудачное сохранение
        username_check: debounce-проверка имени (None — без проверки)
        today: источник текущей даты (для расчёта возраста)
    """

    def __init__(
        self,
        flow: Flow = STANDARD_FLOW,
        persist: Optional[Callable[[OnboardingResult], None]] = None,
        username_check: Optional[UsernameCheck] = None,
        today: Callable[[], date] = date.today,
    ):
        self.flow = flow
        self._persist = persist
        self._username_check = username_check
        self._today = today
        self.reset()

    def reset(self) -> None:
        """Новая сессия: шаг 1 и чистый черновик, без продолжения с середины."""
        if self._username_check is not None:
            self._username_check.cancel()
        self.step = 1
        self.draft = ProfileDraft(
            height=self.flow.default_height, weight=self.flow.default_weight
        )
        self.session = SessionState()
        self.last_message: Optional[str] = None
        self.result: Optional[OnboardingResult] = None
        logger.info(f"Онбординг ({self.flow.name}) начат с шага 1")

    # ------------------------------------------------------------------
    # Состояние для презентационного слоя
    # ------------------------------------------------------------------

    @property
    def total_steps(self) -> int:
        return self.flow.total_steps

    @property
    def current_step(self) -> StepDescriptor:
        return self.flow.steps[self.step - 1]

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    @property
    def username_check(self) -> Optional[UsernameCheck]:
        return self._username_check

    @property
    def completed(self) -> bool:
        return self.result is not None

    def snapshot(self) -> ProfileDraft:
        return self.draft.snapshot()

    def validate_current(self) -> StepResult:
        return validate(self.step, self.draft, self.session, self.flow, self._today())

    # ------------------------------------------------------------------
    # Входящие события
    # ------------------------------------------------------------------

    def update_field(self, key: str, value) -> None:
        """Изменить поле черновика.

        Строковые значения перечислений приводятся к enum. Единицы измерения
        меняются через toggle_unit, чтобы значения конвертировались.

        Raises:
            KeyError: неизвестное поле
            ValueError: недопустимое значение
        """
        if key == "height_unit":
            self.toggle_unit("height", value)
            return
        if key == "weight_unit":
            self.toggle_unit("weight", value)
            return
        if key == "unit_preference":
            if isinstance(value, dict):
                value = UnitPreference(**value)
            self.toggle_unit("weight", value.weight)
            self.toggle_unit("height", value.height)
            return
        if key == "macros_setup":
            self.select_macros_mode(value)
            return
        if key == "birth_date":
            self.draft.birth_year, self.draft.birth_month, self.draft.birth_day = (
                value.year,
                value.month,
                value.day,
            )
            return

        if key in ENUM_FIELDS:
            value = None if value is None else ENUM_FIELDS[key](value)
        elif key in INT_FIELDS:
            value = int(value)
        elif key == "height":
            # Хранится то же значение, что показывается: шаг и диапазон единицы
            value = snap_height(float(value), self.draft.height_unit)
        elif key == "weight":
            value = snap_weight(float(value), self.draft.weight_unit)
        elif key == "allergies":
            value = set(value)
            unknown = value - set(ALLERGY_OPTIONS)
            if unknown:
                raise ValueError(f"Неизвестные аллергии: {', '.join(sorted(unknown))}")
        elif key == "custom_macros":
            if isinstance(value, dict):
                value = CustomMacros(**value)
            if value is not None:
                value = CustomMacros(
                    protein=clamp_manual_grams(value.protein),
                    carbs=clamp_manual_grams(value.carbs),
                    fats=clamp_manual_grams(value.fats),
                )
        elif key == "name":
            value = str(value)
        else:
            raise KeyError(f"Неизвестное поле черновика: {key}")

        setattr(self.draft, key, value)

        if key == "name" and self._username_check is not None:
            self._username_check.schedule(value, self.session)

    def toggle_unit(self, dimension: str, new_unit) -> None:
        """Сменить единицу роста или веса с конвертацией текущего значения.

        Единица, значение и unit_preference меняются вместе.
        """
        if dimension == "height":
            unit = HeightUnit(new_unit)
            value = convert_height(self.draft.height, self.draft.height_unit, unit)
            self.draft.height, self.draft.height_unit = value, unit
            self.draft.unit_preference.height = unit
        elif dimension == "weight":
            unit = WeightUnit(new_unit)
            value = convert_weight(self.draft.weight, self.draft.weight_unit, unit)
            self.draft.weight, self.draft.weight_unit = value, unit
            self.draft.unit_preference.weight = unit
        else:
            raise KeyError(f"Неизвестное измерение: {dimension}")
        logger.debug(f"Единица {dimension} -> {unit.value}, значение {value}")

    def select_macros_mode(self, mode) -> None:
        """auto или manual; для manual готовит пустые ручные БЖУ."""
        mode = None if mode is None else MacrosSetup(mode)
        self.draft.macros_setup = mode
        if mode == MacrosSetup.MANUAL and self.draft.custom_macros is None:
            self.draft.custom_macros = CustomMacros()

    def toggle_allergy(self, name: str) -> None:
        if name not in ALLERGY_OPTIONS:
            raise ValueError(f"Неизвестная аллергия: {name}")
        self.draft.allergies ^= {name}

    def next(self) -> StepResult:
        """Проверить шаг и перейти вперёд; на последнем шаге — завершить.

        При ошибке проверки шаг и черновик не меняются.

        Raises:
            CompletionError: сохранение на последнем шаге не удалось
            WizardStateError: сессия уже завершена или сохранение в процессе
        """
        result = self.validate_current()
        if not result.valid:
            self.last_message = result.message
            logger.info(f"Шаг {self.step} ({self.current_step.id.value}) не пройден: {result.message}")
            return result

        self.last_message = None
        if self.is_last_step:
            self.complete()
            return result

        self.step += 1
        logger.debug(f"Переход на шаг {self.step}/{self.total_steps}")
        return result

    def back(self) -> bool:
        """Шаг назад без проверки. False, если уже на первом шаге."""
        if self.step <= 1:
            return False
        self.step -= 1
        self.last_message = None
        logger.debug(f"Возврат на шаг {self.step}/{self.total_steps}")
        return True

    def complete(self) -> OnboardingResult:
        """Рассчитать норму и передать профиль на сохранение.

        Доступно только с последнего шага и один раз за сессию.
        Если сохранение упало, черновик остаётся — можно повторить.
        """
        if not self.is_last_step:
            raise WizardStateError("Завершение доступно только с последнего шага")
        if self.session.saving:
            raise CompletionInProgressError("Сохранение уже выполняется")
        if self.completed:
            raise WizardStateError("Онбординг уже завершён")

        check = self.validate_current()
        if not check.valid:
            self.last_message = check.message
            raise StepValidationError(check.message)

        today = self._today()
        draft = self.draft.snapshot()
        if draft.macros_setup != MacrosSetup.MANUAL:
            draft.custom_macros = None
        result = OnboardingResult(
            draft=draft,
            target=compute_target(draft, today),
            age=calculate_age(draft.birth_year, draft.birth_month, draft.birth_day, today),
        )

        self.session.saving = True
        try:
            if self._persist is not None:
                self._persist(result)
        except Exception as e:
            logger.error(f"Ошибка сохранения онбординга: {e}")
            self.last_message = "failed to save onboarding data. please try again."
            raise CompletionError(self.last_message) from e
        finally:
            self.session.saving = False

        self.result = result
        logger.info(
            f"Онбординг завершён: {result.target.calories} ккал, "
            f"Б {result.target.protein} / У {result.target.carbs} / Ж {result.target.fats}"
        )
        return result
