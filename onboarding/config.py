"""Конфигурация онбординга из переменных окружения."""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

# Доступные конфигурации шагов (см. services/steps.py)
KNOWN_FLOWS = ("standard", "legacy")


@dataclass(frozen=True)
class Config:
    """Настройки мастера онбординга."""

    BOT_TOKEN: str
    DATABASE_URL: str
    ONBOARDING_FLOW: str = "standard"
    # Задержка перед проверкой username (секунды)
    USERNAME_CHECK_DELAY: float = 0.5
    # Таймаут проверки "онбординг уже пройден?"
    ONBOARDING_CHECK_TIMEOUT: float = 3.0
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Загрузка конфигурации из окружения."""
        return cls(
            BOT_TOKEN=os.getenv("BOT_TOKEN", ""),
            DATABASE_URL=os.getenv("DATABASE_URL", "sqlite:///onboarding.db"),
            ONBOARDING_FLOW=os.getenv("ONBOARDING_FLOW", "standard"),
            USERNAME_CHECK_DELAY=float(os.getenv("USERNAME_CHECK_DELAY", "0.5")),
            ONBOARDING_CHECK_TIMEOUT=float(os.getenv("ONBOARDING_CHECK_TIMEOUT", "3.0")),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Проверка обязательных настроек."""
        if not self.BOT_TOKEN:
            raise ValueError("BOT_TOKEN не установлен в .env")
        if self.ONBOARDING_FLOW not in KNOWN_FLOWS:
            raise ValueError(
                f"ONBOARDING_FLOW='{self.ONBOARDING_FLOW}', допустимо: {', '.join(KNOWN_FLOWS)}"
            )
        if self.USERNAME_CHECK_DELAY < 0 or self.ONBOARDING_CHECK_TIMEOUT <= 0:
            raise ValueError("Задержки и таймауты должны быть положительными")


# Глобальный экземпляр конфигурации
config = Config.from_env()
