# lootbox/keyboards/main.py
from aiogram.types import KeyboardButton, ReplyKeyboardMarkup

BTN_MOVIE = "🎬 Movie box"
BTN_SERIES = "📺 Series box"
BTN_STATUS = "🎰 Spins"
BTN_COLLECTION = "🏆 Collection"


def main_menu_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text=BTN_MOVIE), KeyboardButton(text=BTN_SERIES)],
            [KeyboardButton(text=BTN_STATUS), KeyboardButton(text=BTN_COLLECTION)],
        ],
        resize_keyboard=True,
        input_field_placeholder="Open a box…",
        selective=False,
        one_time_keyboard=False,
    )
