"""Базовые классы для моделей SQLAlchemy."""
from sqlalchemy import Column, Integer, DateTime
from sqlalchemy.sql import func
from onboarding.database import Base


class TimestampMixin:
    """Миксин для автоматического создания временных меток."""

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class BaseModel(Base, TimestampMixin):
    """Базовая модель для всех таблиц."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)

    def to_dict(self, exclude: tuple = ("id", "created_at", "updated_at")) -> dict:
        """Колонки модели словарём (enum'ы разворачиваются в значения)."""
        result = {}
        for column in self.__table__.columns:
            if column.name in exclude:
                continue
            value = getattr(self, column.name)
            result[column.name] = getattr(value, "value", value)
        return result
