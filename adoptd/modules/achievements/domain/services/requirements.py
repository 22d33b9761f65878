"""
Human readable achievement requirements (Russian, with plural agreement).
"""

from typing import Dict, Tuple

# verb, (one, few, many), suffix
ACTION_PHRASES: Dict[str, Tuple[str, Tuple[str, str, str], str]] = {
    "create_post": ("Создайте", ("пост", "поста", "постов"), ""),
    "create_comment": ("Оставьте", ("комментарий", "комментария", "комментариев"), ""),
    "receive_post_like": ("Получите", ("лайк", "лайка", "лайков"), " на постах"),
    "receive_comment_like": ("Получите", ("лайк", "лайка", "лайков"), " на комментариях"),
    "give_like": ("Поставьте", ("лайк", "лайка", "лайков"), ""),
    "scan_plant": ("Проведите", ("сканирование", "сканирования", "сканирований"), " растений"),
    "chatbot_message": ("Отправьте", ("сообщение", "сообщения", "сообщений"), " чат-боту"),
    "daily_login": ("Войдите в систему", ("день", "дня", "дней"), " подряд"),
}


def plural(count: int, forms: Tuple[str, str, str]) -> str:
    """1 -> one, below 5 -> few, otherwise many."""
    one, few, many = forms
    if count == 1:
        return one
    if count < 5:
        return few
    return many


def describe_action(action: str, count: int) -> str:
    phrase = ACTION_PHRASES.get(action)
    if phrase is None:
        return f'Выполните действие "{action}" {count} раз'
    verb, forms, suffix = phrase
    return f"{verb} {count} {plural(count, forms)}{suffix}"


def describe_title_requirement(achievement_name: str) -> str:
    return f'Получите достижение "{achievement_name}"'


SPECIAL_CONDITIONS = "Выполните особые условия"
