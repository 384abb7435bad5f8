"""Тесты перевода единиц."""
import pytest
from onboarding.models import HeightUnit, WeightUnit
from onboarding.services.units import (
    cm_to_inches,
    inches_to_cm,
    kg_to_lbs,
    lbs_to_kg,
    convert_height,
    convert_weight,
    height_to_cm,
    weight_to_kg,
    format_height,
    format_weight,
    round_half_up,
)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(356.5) == 357
    assert round_half_up(70.25, 0.5) == 70.5
    assert round_half_up(70.2, 0.5) == 70.0


@pytest.mark.parametrize(
    "cm, inches",
    [(180, 71), (170, 67), (152, 60), (100, 48), (250, 95)],
)
def test_cm_to_inches(cm, inches):
    assert cm_to_inches(cm) == inches


def test_inches_to_cm():
    assert inches_to_cm(71) == 180
    assert inches_to_cm(60) == 152
    assert inches_to_cm(48) == 122


def test_height_is_clamped_to_unit_range():
    """Значения вне диапазона прижимаются к границе без ошибки."""
    assert inches_to_cm(30) == 100
    assert inches_to_cm(120) == 250
    assert cm_to_inches(50) == 48
    assert cm_to_inches(300) == 95


def test_weight_conversion():
    assert kg_to_lbs(70) == 154
    assert kg_to_lbs(80) == 176
    assert lbs_to_kg(154) == 70.0
    # 155 lbs = 70.31 кг -> шаг 0.5
    assert lbs_to_kg(155) == 70.5


def test_weight_is_clamped_to_unit_range():
    assert kg_to_lbs(300) == 550
    assert kg_to_lbs(10) == 45
    assert lbs_to_kg(30) == 20.0
    assert lbs_to_kg(600) == 250.0


def test_result_types():
    """Дюймы, сантиметры и фунты целые, килограммы с шагом 0.5."""
    assert isinstance(cm_to_inches(180), int)
    assert isinstance(inches_to_cm(71), int)
    assert isinstance(kg_to_lbs(70), int)
    assert isinstance(lbs_to_kg(154), float)


def test_height_round_trip_within_one_cm():
    """cm -> in -> cm отличается не больше чем на 1 см."""
    for cm in range(122, 242):
        assert abs(inches_to_cm(cm_to_inches(cm)) - cm) <= 1, cm


def test_height_round_trip_at_range_edges():
    """Края сантиметров лежат за диапазоном дюймов 48..95 и прижимаются."""
    assert cm_to_inches(100) == 48
    assert inches_to_cm(48) == 122
    assert cm_to_inches(250) == 95
    assert inches_to_cm(95) == 241
    for cm in range(100, 122):
        assert inches_to_cm(cm_to_inches(cm)) == 122


def test_weight_round_trip_within_half_kg():
    """kg -> lbs -> kg отличается не больше чем на 0.5 кг."""
    for i in range(461):
        kg = 20 + i * 0.5
        assert abs(lbs_to_kg(kg_to_lbs(kg)) - kg) <= 0.5, kg


def test_convert_same_unit_is_identity():
    assert convert_height(173.4, HeightUnit.CM, HeightUnit.CM) == 173.4
    assert convert_weight(71.3, WeightUnit.KG, WeightUnit.KG) == 71.3


def test_convert_between_units():
    assert convert_height(180, HeightUnit.CM, HeightUnit.FT) == 71
    assert convert_height(71, HeightUnit.FT, HeightUnit.CM) == 180
    assert convert_weight(70, WeightUnit.KG, WeightUnit.LBS) == 154
    assert convert_weight(154, WeightUnit.LBS, WeightUnit.KG) == 70.0


def test_raw_conversion_for_calculation():
    """Для BMR значения переводятся без округления."""
    assert height_to_cm(180, HeightUnit.CM) == 180
    assert height_to_cm(71, HeightUnit.FT) == pytest.approx(180.34)
    assert weight_to_kg(70, WeightUnit.KG) == 70
    assert weight_to_kg(154, WeightUnit.LBS) == pytest.approx(69.853168)


def test_format_height():
    assert format_height(180, HeightUnit.CM) == "180 cm"
    assert format_height(71, HeightUnit.FT) == "5'11\""
    assert format_height(72, HeightUnit.FT) == "6'0\""


def test_format_weight():
    assert format_weight(70, WeightUnit.KG) == "70.0 kg"
    assert format_weight(70.5, WeightUnit.KG) == "70.5 kg"
    assert format_weight(154.4, WeightUnit.LBS) == "154 lbs"
