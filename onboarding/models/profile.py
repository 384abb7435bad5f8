"""Перечисления онбординга и модель сохранённого профиля."""
from sqlalchemy import Column, Date, Integer, Float, String, ForeignKey, Enum
from sqlalchemy.orm import relationship
import enum
from onboarding.models.base import BaseModel


class Sex(str, enum.Enum):
    """Пол пользователя."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class HeightUnit(str, enum.Enum):
    """Единица роста. Для FT значение хранится в дюймах."""
    CM = "cm"
    FT = "ft"


class WeightUnit(str, enum.Enum):
    KG = "kg"
    LBS = "lbs"


class Goal(str, enum.Enum):
    """Цель пользователя."""
    LOSE = "lose"
    MAINTAIN = "maintain"
    BUILD = "build"


class ActivityLevel(str, enum.Enum):
    """Уровень активности."""
    SEDENTARY = "sedentary"  # Почти без нагрузок
    LIGHTLY = "lightly"      # 1-3 тренировки в неделю
    MODERATE = "moderate"    # 3-5 тренировок
    VERY = "very"            # 6-7 тренировок


class DietPreference(str, enum.Enum):
    REGULAR = "regular"
    HIGH_PROTEIN = "high-protein"
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    KETO = "keto"
    HALAL = "halal"


class GoalIntensity(str, enum.Enum):
    """Насколько быстро двигаться к цели."""
    MILD = "mild"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"


class Purpose(str, enum.Enum):
    MEALS = "meals"
    WORKOUTS = "workouts"
    BOTH = "both"
    DISCIPLINE = "discipline"


class MacrosSetup(str, enum.Enum):
    """Авторасчёт БЖУ или ручной ввод."""
    AUTO = "auto"
    MANUAL = "manual"


class Profile(BaseModel):
    """Профиль, сохранённый по завершении онбординга."""

    __tablename__ = "profiles"

    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Личные данные
    name = Column(String(50), nullable=False)
    birth_date = Column(Date, nullable=False)
    age = Column(Integer, nullable=False)
    sex = Column(Enum(Sex), nullable=False)

    # Замеры в единицах, выбранных пользователем
    height = Column(Float, nullable=False)
    height_unit = Column(Enum(HeightUnit), nullable=False, default=HeightUnit.CM)
    weight = Column(Float, nullable=False)
    weight_unit = Column(Enum(WeightUnit), nullable=False, default=WeightUnit.KG)

    # Цели и предпочтения
    goal = Column(Enum(Goal), nullable=False)
    activity_level = Column(Enum(ActivityLevel), nullable=False)
    diet_preference = Column(Enum(DietPreference), nullable=False)
    allergies = Column(String(200), default="")  # через запятую
    goal_intensity = Column(Enum(GoalIntensity), nullable=False)
    purpose = Column(Enum(Purpose), nullable=False)
    macros_setup = Column(Enum(MacrosSetup), nullable=False)

    # Ручные БЖУ (только для MacrosSetup.MANUAL)
    custom_protein = Column(Integer)
    custom_carbs = Column(Integer)
    custom_fats = Column(Integer)

    # Дневные нормы
    daily_calories = Column(Integer, nullable=False)
    daily_protein = Column(Integer, nullable=False)
    daily_carbs = Column(Integer, nullable=False)
    daily_fats = Column(Integer, nullable=False)
    base_tdee = Column(Integer)  # поддержание до корректировки под цель

    # Relationship
    user = relationship("User", back_populates="profile")
