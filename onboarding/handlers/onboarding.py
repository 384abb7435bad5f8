"""Обработчики шагов онбординга в Telegram."""
import asyncio
import logging
import re
from functools import partial
from telegram import Update
from telegram.error import BadRequest
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
    MessageHandler,
    filters,
    ContextTypes,
)
from onboarding.config import config
from onboarding.errors import CompletionError, WizardStateError
from onboarding.keyboards.onboarding import get_step_keyboard
from onboarding.models import CustomMacros, HeightUnit, MacrosSetup
from onboarding.services.nutrition_calc import describe_target
from onboarding.services.steps import get_flow
from onboarding.services.units import format_height, format_weight
from onboarding.services.user_service import save_onboarding, username_exists
from onboarding.services.username_check import UsernameCheck
from onboarding.services.validation import StepId
from onboarding.services.wizard import OnboardingWizard

logger = logging.getLogger(__name__)

WIZARD_KEY = "onboarding_wizard"

NUMBER = r"(\d+(?:[.,]\d+)?)"


def parse_birthdate(text: str) -> tuple[int, int, int]:
    """Разобрать "DD.MM.YYYY" (также / или -) в (день, месяц, год).

    Календарную корректность проверяет валидатор шага.
    """
    match = re.fullmatch(r"\s*(\d{1,2})[./-](\d{1,2})[./-](\d{4})\s*", text)
    if not match:
        raise ValueError(f"Не удалось разобрать дату: {text}")
    day, month, year = (int(part) for part in match.groups())
    return day, month, year


def parse_height(text: str, unit: HeightUnit) -> float:
    """Рост в единице unit. Для футов: 5'11 или число дюймов."""
    text = text.strip().lower()
    if unit == HeightUnit.FT:
        match = re.fullmatch(r"(\d+)\s*(?:'|ft)\s*(?:(\d+)\s*(?:\"|in)?)?", text)
        if match:
            feet, inches = match.groups()
            return int(feet) * 12 + int(inches or 0)
        match = re.fullmatch(rf"{NUMBER}\s*(?:in)?", text)
    else:
        match = re.fullmatch(rf"{NUMBER}\s*(?:cm)?", text)
    if not match:
        raise ValueError(f"Не удалось разобрать рост: {text}")
    return float(match.group(1).replace(",", "."))


def parse_weight(text: str) -> float:
    match = re.fullmatch(rf"\s*{NUMBER}\s*(?:kg|lbs?)?\s*", text.lower())
    if not match:
        raise ValueError(f"Не удалось разобрать вес: {text}")
    return float(match.group(1).replace(",", "."))


def parse_macros(text: str) -> CustomMacros:
    """Разобрать "белки углеводы жиры" в граммах: "150 200 60"."""
    parts = [part for part in re.split(r"[\s,/]+", text.strip()) if part]
    if len(parts) != 3:
        raise ValueError("Нужно три числа: protein carbs fats")
    protein, carbs, fats = (int(float(part.replace(",", "."))) for part in parts)
    return CustomMacros(protein=protein, carbs=carbs, fats=fats)


def build_wizard(telegram_id: int) -> OnboardingWizard:
    """Свежий мастер для пользователя: проверка имени и сохранение в БД."""
    check = UsernameCheck(
        lambda name: asyncio.to_thread(username_exists, name, telegram_id),
        delay=config.USERNAME_CHECK_DELAY,
    )
    return OnboardingWizard(
        flow=get_flow(config.ONBOARDING_FLOW),
        persist=partial(save_onboarding, telegram_id),
        username_check=check,
    )


def render_step(wizard: OnboardingWizard) -> str:
    """Текст текущего шага с введёнными значениями."""
    step = wizard.current_step
    draft = wizard.draft
    lines = [f"<b>{step.title}</b>", f"step {wizard.step}/{wizard.total_steps}", ""]

    if step.id == StepId.NAME:
        lines.append(f"username: {draft.name or '—'}")
        if wizard.session.username_error:
            lines.append(f"❌ {wizard.session.username_error}")
    elif step.id == StepId.BIRTHDATE:
        if draft.birth_year:
            lines.append(f"birthdate: {draft.birth_day:02d}.{draft.birth_month:02d}.{draft.birth_year}")
    elif step.id == StepId.HEIGHT:
        lines.append(f"height: {format_height(draft.height, draft.height_unit)}")
        lines.append("send a number" + (" or 5'11" if draft.height_unit == HeightUnit.FT else ""))
    elif step.id == StepId.WEIGHT:
        lines.append(f"weight: {format_weight(draft.weight, draft.weight_unit)}")
    elif step.id == StepId.ALLERGIES:
        lines.append("optional, select all that apply")
    elif step.id == StepId.MACROS_SETUP and draft.macros_setup == MacrosSetup.MANUAL:
        macros = draft.custom_macros or CustomMacros()
        lines.append(f"P: {macros.protein or '—'}g | C: {macros.carbs or '—'}g | F: {macros.fats or '—'}g")
        lines.append("send grams as: protein carbs fats (e.g. 150 200 60)")

    return "\n".join(lines).rstrip()


def render_result(wizard: OnboardingWizard) -> str:
    target = wizard.result.target
    text = (
        f"🎉 <b>profile created!</b>\n\n"
        f"📊 your daily target:\n"
        f"🔥 {target.calories} kcal\n"
        f"🥩 P: {target.protein}g | 🍚 C: {target.carbs}g | 🥑 F: {target.fats}g"
    )
    if wizard.flow.show_results:
        summary = describe_target(target)
        if summary:
            text += f"\n\n{summary}"
    return text


async def start_onboarding(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Запуск мастера всегда с шага 1 и чистого черновика."""
    previous = context.user_data.get(WIZARD_KEY)
    if previous is not None and previous.username_check is not None:
        previous.username_check.cancel()

    wizard = build_wizard(update.effective_user.id)
    context.user_data[WIZARD_KEY] = wizard

    await update.effective_message.reply_text(
        render_step(wizard), reply_markup=get_step_keyboard(wizard), parse_mode="HTML"
    )


async def _refresh(query, wizard: OnboardingWizard) -> None:
    try:
        await query.edit_message_text(
            render_step(wizard), reply_markup=get_step_keyboard(wizard), parse_mode="HTML"
        )
    except BadRequest as e:
        # Нажатие не изменило экран
        if "not modified" not in str(e).lower():
            raise


async def onboarding_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработка inline-кнопок мастера (ob:...)."""
    query = update.callback_query
    wizard = context.user_data.get(WIZARD_KEY)
    if wizard is None:
        await query.answer("session expired, send /start", show_alert=True)
        return

    parts = query.data.split(":")
    action = parts[1]

    try:
        if action == "next":
            result = wizard.next()
            if not result.valid:
                await query.answer(result.message or "please complete this step", show_alert=True)
                return
            if wizard.completed:
                await query.answer()
                context.user_data.pop(WIZARD_KEY, None)
                await query.edit_message_text(render_result(wizard), parse_mode="HTML")
                return
        elif action == "back":
            wizard.back()
        elif action == "set":
            wizard.update_field(parts[2], parts[3])
        elif action == "unit":
            wizard.toggle_unit(parts[2], parts[3])
        elif action == "allergy":
            wizard.toggle_allergy(parts[2])
        elif action == "macros":
            wizard.select_macros_mode(parts[2])
        else:
            raise ValueError(f"Неизвестное действие: {action}")
    except CompletionError as e:
        await query.answer(str(e), show_alert=True)
        return
    except WizardStateError as e:
        # Повторное нажатие во время сохранения
        logger.info(f"Онбординг: {e}")
        await query.answer()
        return
    except (KeyError, ValueError, IndexError) as e:
        logger.warning(f"Некорректный callback '{query.data}': {e}")
        await query.answer("unknown option")
        return

    await query.answer()
    await _refresh(query, wizard)


async def onboarding_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Текстовый ввод для шагов с вводом (имя, дата, рост, вес, БЖУ)."""
    wizard = context.user_data.get(WIZARD_KEY)
    if wizard is None:
        await update.message.reply_text("send /start to set up your profile")
        return

    step = wizard.current_step
    text = update.message.text

    if not step.text_input:
        await update.message.reply_text("please use the buttons below 👇")
        return

    try:
        if step.id == StepId.NAME:
            wizard.update_field("name", text)
            if wizard.username_check is not None:
                await wizard.username_check.wait()
        elif step.id == StepId.BIRTHDATE:
            day, month, year = parse_birthdate(text)
            wizard.update_field("birth_day", day)
            wizard.update_field("birth_month", month)
            wizard.update_field("birth_year", year)
        elif step.id == StepId.HEIGHT:
            wizard.update_field("height", parse_height(text, wizard.draft.height_unit))
        elif step.id == StepId.WEIGHT:
            wizard.update_field("weight", parse_weight(text))
        elif step.id == StepId.MACROS_SETUP:
            if wizard.draft.macros_setup != MacrosSetup.MANUAL:
                await update.message.reply_text("choose manual to enter your own macros")
                return
            wizard.update_field("custom_macros", parse_macros(text))
    except ValueError as e:
        logger.info(f"Онбординг: некорректный ввод на шаге {step.id.value}: {e}")
        await update.message.reply_text("❌ couldn't read that, please try again")
        return

    await update.message.reply_text(
        render_step(wizard), reply_markup=get_step_keyboard(wizard), parse_mode="HTML"
    )


async def cancel(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Отмена онбординга."""
    wizard = context.user_data.pop(WIZARD_KEY, None)
    if wizard is not None and wizard.username_check is not None:
        wizard.username_check.cancel()
    await update.message.reply_text("❌ onboarding cancelled. send /start to begin again.")


def register_handlers(application: Application) -> None:
    """Регистрация обработчиков."""
    application.add_handler(CommandHandler("cancel", cancel))
    application.add_handler(CallbackQueryHandler(onboarding_callback, pattern=r"^ob:"))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, onboarding_text))
