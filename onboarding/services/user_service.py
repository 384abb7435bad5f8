"""Сервис для работы с пользователями и сохранённым онбордингом."""
from datetime import date
from typing import Optional
from telegram import User as TelegramUser
from sqlalchemy.orm import joinedload
from onboarding.database import get_db
from onboarding.models import Profile, User
from onboarding.services.wizard import OnboardingResult


def normalize_username(username: str) -> str:
    """Ключ уникальности: trim + lower."""
    return (username or "").strip().lower()


def get_or_create_user(telegram_user: TelegramUser) -> User:
    """Получить или создать пользователя.

    Args:
        telegram_user: Объект пользователя из Telegram

    Returns:
        Объект User из БД
    """
    with get_db() as db:
        user = (
            db.query(User)
            .options(joinedload(User.profile))
            .filter(User.telegram_id == telegram_user.id)
            .first()
        )

        if not user:
            user = User(
                telegram_id=telegram_user.id,
                first_name=telegram_user.first_name,
                last_name=telegram_user.last_name,
                onboarding_completed=False,
            )
            db.add(user)
            db.commit()
            db.refresh(user)

        return user


def has_completed_onboarding(telegram_id: int) -> bool:
    """Пройден ли онбординг. Неизвестный пользователь — не пройден."""
    with get_db() as db:
        user = db.query(User).filter(User.telegram_id == telegram_id).first()
        return bool(user and user.onboarding_completed)


def username_exists(candidate: str, telegram_id: Optional[int] = None) -> bool:
    """Занят ли username другим пользователем.

    Собственный username пользователя telegram_id считается свободным.
    """
    username = normalize_username(candidate)
    if not username:
        return False

    with get_db() as db:
        owner = db.query(User).filter(User.username == username).first()
        if owner is None:
            return False
        return telegram_id is None or owner.telegram_id != telegram_id


def save_onboarding(telegram_id: int, result: OnboardingResult) -> Profile:
    """Сохранить результат онбординга и отметить его пройденным.

    Повторное сохранение перезаписывает профиль пользователя.

    Raises:
        LookupError: пользователь не найден
        sqlalchemy.exc.IntegrityError: username занят (гонка с другим пользователем)
    """
    record = result.as_record()
    target = record["target_macros"]
    custom = record.get("custom_macros") or {}

    with get_db() as db:
        user = db.query(User).filter(User.telegram_id == telegram_id).first()
        if user is None:
            raise LookupError(f"Пользователь {telegram_id} не найден")

        profile = db.query(Profile).filter(Profile.user_id == user.id).first()
        if profile is None:
            profile = Profile(user_id=user.id)
            db.add(profile)

        profile.name = record["name"]
        profile.birth_date = date.fromisoformat(record["birth_date"])
        profile.age = record["age"]
        profile.sex = result.draft.sex
        profile.height = record["height"]
        profile.height_unit = result.draft.height_unit
        profile.weight = record["weight"]
        profile.weight_unit = result.draft.weight_unit
        profile.goal = result.draft.goal
        profile.activity_level = result.draft.activity_level
        profile.diet_preference = result.draft.diet_preference
        profile.allergies = ",".join(record["allergies"])
        profile.goal_intensity = result.draft.goal_intensity
        profile.purpose = result.draft.purpose
        profile.macros_setup = result.draft.macros_setup
        profile.custom_protein = custom.get("protein")
        profile.custom_carbs = custom.get("carbs")
        profile.custom_fats = custom.get("fats")

        profile.daily_calories = target["calories"]
        profile.daily_protein = target["protein"]
        profile.daily_carbs = target["carbs"]
        profile.daily_fats = target["fats"]
        profile.base_tdee = target.get("base_tdee")

        user.username = normalize_username(record["name"])
        user.display_name = record["name"]
        user.onboarding_completed = True

        db.commit()
        db.refresh(profile)
        return profile


def get_daily_target(telegram_id: int) -> Optional[dict]:
    """Сохранённая дневная норма или None."""
    data = get_profile_data(telegram_id)
    if data is None:
        return None
    target = {key: data[f"daily_{key}"] for key in ("calories", "protein", "carbs", "fats")}
    if data["base_tdee"] is not None:
        target["base_tdee"] = data["base_tdee"]
    return target


def get_profile_data(telegram_id: int) -> Optional[dict]:
    """Сохранённый профиль словарём (значения enum'ов — строки)."""
    with get_db() as db:
        profile = (
            db.query(Profile)
            .join(User, Profile.user_id == User.id)
            .filter(User.telegram_id == telegram_id)
            .first()
        )
        return profile.to_dict(exclude=("id", "user_id", "created_at", "updated_at")) if profile else None


def reset_onboarding(telegram_id: int) -> bool:
    """Сбросить онбординг: профиль, флаг и занятый username.

    Returns:
        False, если пользователь не найден
    """
    with get_db() as db:
        user = db.query(User).filter(User.telegram_id == telegram_id).first()
        if user is None:
            return False

        if user.profile is not None:
            db.delete(user.profile)
        user.username = None
        user.display_name = None
        user.onboarding_completed = False
        db.commit()
        return True
