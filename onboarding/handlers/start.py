"""Обработчики команд /start, /help, /profile и /reset."""
import asyncio
import logging
from sqlalchemy.exc import SQLAlchemyError
from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes
from onboarding.config import config
from onboarding.handlers.onboarding import start_onboarding
from onboarding.models import HeightUnit, WeightUnit
from onboarding.services.units import format_height, format_weight
from onboarding.services.user_service import (
    get_daily_target,
    get_or_create_user,
    get_profile_data,
    has_completed_onboarding,
    reset_onboarding,
)

logger = logging.getLogger(__name__)


async def check_onboarding_completed(telegram_id: int) -> bool:
    """Пройден ли онбординг; при таймауте или ошибке БД считаем, что нет."""
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(has_completed_onboarding, telegram_id),
            timeout=config.ONBOARDING_CHECK_TIMEOUT,
        )
    except asyncio.TimeoutError:
        logger.warning(f"Проверка онбординга {telegram_id} превысила таймаут, продолжаем онбординг")
        return False
    except SQLAlchemyError as e:
        logger.error(f"Ошибка проверки онбординга {telegram_id}: {e}")
        return False


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /start."""
    user = get_or_create_user(update.effective_user)

    if await check_onboarding_completed(user.telegram_id):
        target = get_daily_target(user.telegram_id) or {}
        await update.message.reply_text(
            f"👋 welcome back, {user.display_name or user.first_name or 'friend'}!\n\n"
            f"📊 your daily target: {target.get('calories', '—')} kcal\n"
            f"/profile to view your data, /reset to start over"
        )
        return

    await start_onboarding(update, context)


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка команды /help."""
    text = (
        "📖 <b>commands:</b>\n\n"
        "/start - set up your profile\n"
        "/profile - your data and daily macros\n"
        "/reset - clear your profile and start over\n"
        "/cancel - stop the current setup\n"
        "/help - this help"
    )
    await update.message.reply_text(text, parse_mode="HTML")


async def profile_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Показать сохранённый профиль."""
    data = get_profile_data(update.effective_user.id)
    if data is None:
        await update.message.reply_text("❌ no profile yet, send /start")
        return

    height = format_height(data["height"], HeightUnit(data["height_unit"]))
    weight = format_weight(data["weight"], WeightUnit(data["weight_unit"]))
    await update.message.reply_text(
        f"👤 <b>{data['name']}</b>, {data['age']}\n\n"
        f"sex: {data['sex']}\n"
        f"height: {height} | weight: {weight}\n"
        f"goal: {data['goal']} ({data['goal_intensity']})\n"
        f"activity: {data['activity_level']}\n"
        f"diet: {data['diet_preference']}\n"
        f"allergies: {data['allergies'] or 'none'}\n\n"
        f"🔥 {data['daily_calories']} kcal\n"
        f"P: {data['daily_protein']}g | C: {data['daily_carbs']}g | F: {data['daily_fats']}g",
        parse_mode="HTML",
    )


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Сброс онбординга."""
    if reset_onboarding(update.effective_user.id):
        await update.message.reply_text("🔄 onboarding reset. send /start to begin again.")
    else:
        await update.message.reply_text("nothing to reset, send /start")


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("profile", profile_command))
    application.add_handler(CommandHandler("reset", reset_command))
