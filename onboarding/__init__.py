"""Мастер онбординга: профиль пользователя и дневная норма БЖУ."""
