"""Общие фикстуры тестов."""
import os
import tempfile
from datetime import date

# До импорта пакета: БД во временном файле, токен для Config.validate()
_DB_DIR = tempfile.mkdtemp(prefix="onboarding-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR}/test.db"
os.environ.setdefault("BOT_TOKEN", "test_token")

import pytest  # noqa: E402

from onboarding.database import Base, engine, init_db  # noqa: E402
from onboarding.models import CustomMacros  # noqa: E402
from onboarding.services.wizard import OnboardingWizard  # noqa: E402

# Фиксированная "сегодняшняя" дата для расчёта возраста
TODAY = date(2026, 10, 19)


@pytest.fixture()
def db():
    """Чистые таблицы на каждый тест."""
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


def fill_draft(wizard: OnboardingWizard, macros_setup: str = "auto") -> None:
    """Заполнить все поля черновика корректными значениями (30 лет на TODAY)."""
    wizard.update_field("name", "Alex")
    wizard.update_field("birth_day", 15)
    wizard.update_field("birth_month", 5)
    wizard.update_field("birth_year", 1996)
    wizard.update_field("sex", "male")
    wizard.update_field("height", 180)
    wizard.update_field("weight", 80)
    wizard.update_field("goal", "maintain")
    wizard.update_field("activity_level", "moderate")
    wizard.update_field("diet_preference", "regular")
    wizard.update_field("goal_intensity", "moderate")
    wizard.update_field("purpose", "both")
    wizard.select_macros_mode(macros_setup)
    if macros_setup == "manual":
        wizard.update_field("custom_macros", CustomMacros(protein=100, carbs=200, fats=50))


def advance_to_last_step(wizard: OnboardingWizard) -> None:
    while not wizard.is_last_step:
        result = wizard.next()
        assert result.valid, result.message
