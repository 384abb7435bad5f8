"""Тесты Telegram-обработчиков онбординга."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import TODAY, advance_to_last_step, fill_draft
from onboarding.handlers.onboarding import (
    WIZARD_KEY,
    onboarding_callback,
    onboarding_text,
    parse_birthdate,
    parse_height,
    parse_macros,
    parse_weight,
    render_result,
    render_step,
)
from onboarding.keyboards.onboarding import get_step_keyboard
from onboarding.models import CustomMacros, HeightUnit, Sex
from onboarding.services.steps import LEGACY_FLOW
from onboarding.services.validation import StepId
from onboarding.services.wizard import OnboardingWizard


def test_parse_birthdate():
    assert parse_birthdate("15.05.1996") == (15, 5, 1996)
    assert parse_birthdate(" 1/2/2000 ") == (1, 2, 2000)
    # календарная проверка - дело валидатора
    assert parse_birthdate("31-02-2000") == (31, 2, 2000)
    with pytest.raises(ValueError):
        parse_birthdate("May 15")


def test_parse_height():
    assert parse_height("180", HeightUnit.CM) == 180
    assert parse_height("180.5 cm", HeightUnit.CM) == 180.5
    assert parse_height("5'11", HeightUnit.FT) == 71
    assert parse_height("6 ft", HeightUnit.FT) == 72
    assert parse_height("71", HeightUnit.FT) == 71
    with pytest.raises(ValueError):
        parse_height("tall", HeightUnit.CM)


def test_parse_weight():
    assert parse_weight("70") == 70
    assert parse_weight("70,5 kg") == 70.5
    assert parse_weight("154 lbs") == 154
    with pytest.raises(ValueError):
        parse_weight("heavy")


def test_parse_macros():
    assert parse_macros("150 200 60") == CustomMacros(protein=150, carbs=200, fats=60)
    assert parse_macros("150, 200, 60") == CustomMacros(protein=150, carbs=200, fats=60)
    with pytest.raises(ValueError):
        parse_macros("150 200")


def callbacks(markup):
    return [button.callback_data for row in markup.inline_keyboard for button in row]


class TestKeyboard:
    def test_welcome(self):
        wizard = OnboardingWizard(today=lambda: TODAY)
        assert callbacks(get_step_keyboard(wizard)) == ["ob:next"]

    def test_choice_step(self):
        wizard = OnboardingWizard(today=lambda: TODAY)
        wizard.step = wizard.flow.index_of(StepId.SEX)
        wizard.update_field("sex", "female")
        markup = get_step_keyboard(wizard)
        assert callbacks(markup) == [
            "ob:set:sex:male",
            "ob:set:sex:female",
            "ob:set:sex:other",
            "ob:back",
            "ob:next",
        ]
        assert markup.inline_keyboard[1][0].text == "✅ female"
        assert markup.inline_keyboard[-1][1].text == f"continue ({wizard.step}/14)"

    def test_allergies(self):
        wizard = OnboardingWizard(today=lambda: TODAY)
        wizard.step = wizard.flow.index_of(StepId.ALLERGIES)
        assert "ob:allergy:nuts" in callbacks(get_step_keyboard(wizard))

    def test_unit_preference(self):
        wizard = OnboardingWizard(today=lambda: TODAY)
        wizard.step = wizard.flow.index_of(StepId.UNIT_PREFERENCE)
        data = callbacks(get_step_keyboard(wizard))
        assert {"ob:unit:weight:kg", "ob:unit:weight:lbs", "ob:unit:height:cm", "ob:unit:height:ft"} <= set(data)

    def test_last_step(self):
        wizard = OnboardingWizard(today=lambda: TODAY)
        fill_draft(wizard)
        advance_to_last_step(wizard)
        markup = get_step_keyboard(wizard)
        assert "ob:macros:manual" in callbacks(markup)
        assert markup.inline_keyboard[-1][-1].text == "let's go!"


def test_render_step_shows_values():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.step = wizard.flow.index_of(StepId.HEIGHT)
    wizard.toggle_unit("height", "ft")
    text = render_step(wizard)
    assert "5'7\"" in text
    assert f"step {wizard.step}/14" in text


def test_render_result_legacy_has_summary():
    wizard = OnboardingWizard(flow=LEGACY_FLOW, today=lambda: TODAY)
    fill_draft(wizard)
    advance_to_last_step(wizard)
    wizard.complete()
    text = render_result(wizard)
    assert "2759 kcal" in text
    assert "right at your maintenance of 2759" in text


def make_callback_update(data):
    query = SimpleNamespace(
        data=data,
        answer=AsyncMock(),
        edit_message_text=AsyncMock(),
    )
    return SimpleNamespace(callback_query=query), query


def make_context(wizard=None):
    user_data = {} if wizard is None else {WIZARD_KEY: wizard}
    return SimpleNamespace(user_data=user_data)


@pytest.mark.asyncio
async def test_callback_invalid_step_shows_alert():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.next()
    update, query = make_callback_update("ob:next")

    await onboarding_callback(update, make_context(wizard))

    query.answer.assert_awaited_once_with("please enter your username", show_alert=True)
    query.edit_message_text.assert_not_awaited()
    assert wizard.step == 2


@pytest.mark.asyncio
async def test_callback_sets_field_and_refreshes():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.step = wizard.flow.index_of(StepId.SEX)
    update, query = make_callback_update("ob:set:sex:male")

    await onboarding_callback(update, make_context(wizard))

    assert wizard.draft.sex == Sex.MALE
    query.answer.assert_awaited_once_with()
    query.edit_message_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_callback_unknown_option():
    wizard = OnboardingWizard(today=lambda: TODAY)
    update, query = make_callback_update("ob:allergy:cats")

    await onboarding_callback(update, make_context(wizard))

    query.answer.assert_awaited_once_with("unknown option")
    assert wizard.draft.allergies == set()


@pytest.mark.asyncio
async def test_callback_completes_wizard():
    persist = MagicMock()
    wizard = OnboardingWizard(persist=persist, today=lambda: TODAY)
    fill_draft(wizard)
    advance_to_last_step(wizard)
    context = make_context(wizard)
    update, query = make_callback_update("ob:next")

    await onboarding_callback(update, context)

    persist.assert_called_once()
    assert WIZARD_KEY not in context.user_data
    assert "profile created" in query.edit_message_text.await_args.args[0]


@pytest.mark.asyncio
async def test_callback_without_session():
    update, query = make_callback_update("ob:next")
    await onboarding_callback(update, make_context())
    query.answer.assert_awaited_once_with("session expired, send /start", show_alert=True)


@pytest.mark.asyncio
async def test_text_input_sets_height():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.step = wizard.flow.index_of(StepId.HEIGHT)
    message = SimpleNamespace(text="182", reply_text=AsyncMock())

    await onboarding_text(SimpleNamespace(message=message), make_context(wizard))

    assert wizard.draft.height == 182
    message.reply_text.assert_awaited_once()


@pytest.mark.asyncio
async def test_text_input_on_choice_step():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.step = wizard.flow.index_of(StepId.SEX)
    message = SimpleNamespace(text="male", reply_text=AsyncMock())

    await onboarding_text(SimpleNamespace(message=message), make_context(wizard))

    assert wizard.draft.sex is None
    message.reply_text.assert_awaited_once_with("please use the buttons below 👇")


@pytest.mark.asyncio
async def test_onboarding_check_times_out(monkeypatch):
    """Медленная БД не блокирует /start: считаем онбординг не пройденным."""
    import time
    from onboarding.config import Config
    from onboarding.handlers import start

    def slow_check(telegram_id):
        time.sleep(0.2)
        return True

    monkeypatch.setattr(start, "has_completed_onboarding", slow_check)
    monkeypatch.setattr(
        start, "config", Config(BOT_TOKEN="t", DATABASE_URL="sqlite://", ONBOARDING_CHECK_TIMEOUT=0.01)
    )
    assert await start.check_onboarding_completed(1) is False


@pytest.mark.asyncio
async def test_onboarding_check_db_error(monkeypatch):
    from sqlalchemy.exc import OperationalError
    from onboarding.handlers import start

    def broken_check(telegram_id):
        raise OperationalError("SELECT", {}, Exception("db is locked"))

    monkeypatch.setattr(start, "has_completed_onboarding", broken_check)
    assert await start.check_onboarding_completed(1) is False


@pytest.mark.asyncio
async def test_text_input_out_of_range_is_clamped():
    wizard = OnboardingWizard(today=lambda: TODAY)
    wizard.step = wizard.flow.index_of(StepId.HEIGHT)
    message = SimpleNamespace(text="1", reply_text=AsyncMock())

    await onboarding_text(SimpleNamespace(message=message), make_context(wizard))

    assert wizard.draft.height == 100
    assert "height: 100 cm" in message.reply_text.await_args.args[0]
