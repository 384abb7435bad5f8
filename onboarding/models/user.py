"""Модель пользователя Telegram."""
from sqlalchemy import Column, BigInteger, Boolean, String
from sqlalchemy.orm import relationship
from onboarding.models.base import BaseModel


class User(BaseModel):
    """Пользователь бота."""

    __tablename__ = "users"

    telegram_id = Column(BigInteger, unique=True, nullable=False, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))

    # Username из онбординга: нормализованный (trim + lower) для уникальности
    # и исходный вариант для отображения
    username = Column(String(50), unique=True, index=True)
    display_name = Column(String(50))

    onboarding_completed = Column(Boolean, nullable=False, default=False)

    # Relationships
    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
