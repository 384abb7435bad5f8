"""Точка входа бота онбординга."""
import logging
from telegram.ext import Application
from onboarding.config import config
from onboarding.database import init_db
from onboarding.handlers import register_start_handlers, register_onboarding_handlers

# Настройка логирования
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Запуск бота."""
    # Проверка конфигурации
    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Ошибка конфигурации: {e}")
        return

    # Инициализация БД
    logger.info("Инициализация базы данных...")
    init_db()

    # Создание приложения
    logger.info(f"Запуск бота (онбординг: {config.ONBOARDING_FLOW})...")
    application = Application.builder().token(config.BOT_TOKEN).build()

    # Регистрация обработчиков: команды раньше текстового ввода
    register_start_handlers(application)
    register_onboarding_handlers(application)

    application.run_polling(allowed_updates=["message", "callback_query"])


if __name__ == "__main__":
    main()
