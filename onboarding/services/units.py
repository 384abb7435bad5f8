"""Перевод роста и веса между единицами.

Каждый результат округляется до шага единицы и зажимается в её диапазон:
см — целые 100..250, дюймы — целые 48..95 (4'0"..7'11"),
кг — шаг 0.5 в 20..250, фунты — целые 45..550.
Выход за диапазон не ошибка: значение молча прижимается к границе.
"""
import logging
import math

from onboarding.models.profile import HeightUnit, WeightUnit

logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54
INCHES_PER_CM = 0.393701
LBS_PER_KG = 2.20462
KG_PER_LB = 0.453592

# (min, max, шаг) для каждой единицы
HEIGHT_RANGES = {
    HeightUnit.CM: (100, 250, 1),
    HeightUnit.FT: (48, 95, 1),  # в дюймах
}
WEIGHT_RANGES = {
    WeightUnit.KG: (20, 250, 0.5),
    WeightUnit.LBS: (45, 550, 1),
}


def round_half_up(value: float, step: float = 1) -> float:
    """Округление до шага, половина — вверх (как Math.round)."""
    return math.floor(value / step + 0.5) * step


def _snap(value: float, low: float, high: float, step: float) -> float:
    stepped = round_half_up(value, step)
    clamped = max(low, min(high, stepped))
    if clamped != stepped:
        logger.debug(f"Значение {value} прижато к диапазону [{low}, {high}]: {clamped}")
    return clamped


def snap_height(value: float, unit: HeightUnit) -> int:
    """Рост в единице unit, округлённый и зажатый в её диапазон."""
    low, high, step = HEIGHT_RANGES[unit]
    return int(_snap(value, low, high, step))


def snap_weight(value: float, unit: WeightUnit) -> float:
    """Вес в единице unit, округлённый и зажатый в её диапазон."""
    low, high, step = WEIGHT_RANGES[unit]
    snapped = _snap(value, low, high, step)
    return int(snapped) if unit == WeightUnit.LBS else float(snapped)


def cm_to_inches(cm: float) -> int:
    return snap_height(cm * INCHES_PER_CM, HeightUnit.FT)


def inches_to_cm(inches: float) -> int:
    return snap_height(inches * CM_PER_INCH, HeightUnit.CM)


def kg_to_lbs(kg: float) -> int:
    return snap_weight(kg * LBS_PER_KG, WeightUnit.LBS)


def lbs_to_kg(lbs: float) -> float:
    return snap_weight(lbs * KG_PER_LB, WeightUnit.KG)


def convert_height(value: float, from_unit: HeightUnit, to_unit: HeightUnit) -> float:
    """Перевести рост; при совпадении единиц значение не меняется."""
    if from_unit == to_unit:
        return value
    if to_unit == HeightUnit.FT:
        return cm_to_inches(value)
    return inches_to_cm(value)


def convert_weight(value: float, from_unit: WeightUnit, to_unit: WeightUnit) -> float:
    """Перевести вес; при совпадении единиц значение не меняется."""
    if from_unit == to_unit:
        return value
    if to_unit == WeightUnit.LBS:
        return kg_to_lbs(value)
    return lbs_to_kg(value)


def height_to_cm(value: float, unit: HeightUnit) -> float:
    """Рост в сантиметрах без округления (для расчёта BMR)."""
    if unit == HeightUnit.CM:
        return value
    return value * CM_PER_INCH


def weight_to_kg(value: float, unit: WeightUnit) -> float:
    """Вес в килограммах без округления (для расчёта BMR)."""
    if unit == WeightUnit.KG:
        return value
    return value * KG_PER_LB


def format_height(value: float, unit: HeightUnit) -> str:
    """Строка для отображения: "180 cm" или "5'11\"" ."""
    snapped = snap_height(value, unit)
    if unit == HeightUnit.CM:
        return f"{snapped} cm"
    feet, inches = divmod(snapped, 12)
    return f"{feet}'{inches}\""


def format_weight(value: float, unit: WeightUnit) -> str:
    """Строка для отображения: "70.5 kg" или "154 lbs"."""
    snapped = snap_weight(value, unit)
    if unit == WeightUnit.KG:
        return f"{snapped:.1f} kg"
    return f"{snapped} lbs"
