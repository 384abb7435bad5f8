"""Отложенная (debounce) проверка уникальности username.

Каждое изменение имени отменяет предыдущую проверку и запускает новую
после паузы. Отмена прерывает и ожидание, и уже начатый поиск,
поэтому ответ по устаревшему значению в сессию не попадает.
Ошибка поиска не блокирует пользователя: считаем имя свободным.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Optional, Union

from onboarding.services.validation import (
    MIN_USERNAME_LENGTH,
    MSG_USERNAME_TAKEN,
    MSG_USERNAME_TOO_SHORT,
    SessionState,
)

logger = logging.getLogger(__name__)

UsernameLookup = Callable[[str], Union[bool, Awaitable[bool]]]


class UsernameCheck:
    """Debounce-проверка, результат которой пишется в SessionState."""

    def __init__(self, lookup: UsernameLookup, delay: float = 0.5):
        """
        Args:
            lookup: занят ли username, (candidate) -> bool, sync или async
            delay: пауза после последнего изменения, секунды
        """
        self._lookup = lookup
        self._delay = delay
        self._task: Optional[asyncio.Task] = None

    def schedule(self, candidate: str, session: SessionState) -> None:
        """Запланировать проверку нового значения имени.

        Требует запущенный event loop, если имя достаточно длинное для проверки.
        """
        self.cancel()
        session.username_error = ""

        username = (candidate or "").strip()
        if not username:
            session.checking_username = False
            return
        if len(username) < MIN_USERNAME_LENGTH:
            session.username_error = MSG_USERNAME_TOO_SHORT
            session.checking_username = False
            return

        # Проверка "в полёте" с момента ввода: next() не пройдёт до ответа
        session.checking_username = True
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(username, session))

    async def _run(self, username: str, session: SessionState) -> None:
        try:
            await asyncio.sleep(self._delay)
            result = self._lookup(username)
            if inspect.isawaitable(result):
                result = await result
            exists = bool(result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Ошибка проверки username '{username}': {e}")
            exists = False

        session.username_error = MSG_USERNAME_TAKEN if exists else ""
        session.checking_username = False

    def cancel(self) -> None:
        """Отменить запланированную проверку (если ещё не завершилась)."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def wait(self) -> None:
        """Дождаться текущей проверки."""
        task = self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass
