from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton, ReplyKeyboardMarkup, KeyboardButton
from config import WEB_BASE_URL, LOGIN_PATH

BTN_REGISTER = "📝 Register"
BTN_LOGIN = "🔑 Log In"
BTN_CANCEL = "❌ Cancel"

# Review screen: callback data → label. Edit callbacks are "edit:<payload key>"
EDITABLE_FIELDS = {
    "companyName": "Company Name",
    "contactPersonFullName": "Contact Person",
    "country": "Country",
    "city": "City",
    "phoneNumber": "Phone",
    "industry": "Industry",
    "email": "Email",
    "password": "Password",
}


def _chunk(items, size):
    return [items[i:i + size] for i in range(0, len(items), size)]


def get_start_keyboard():
    keyboard = ReplyKeyboardMarkup(keyboard=[
        [KeyboardButton(text=BTN_REGISTER), KeyboardButton(text=BTN_LOGIN)]
    ], resize_keyboard=True)
    return keyboard

def get_cancel_keyboard():
    keyboard = ReplyKeyboardMarkup(keyboard=[
        [KeyboardButton(text=BTN_CANCEL)]
    ], resize_keyboard=True)
    return keyboard

def get_options_keyboard(options, columns=2):
    """
    Reply keyboard listing the given options (countries, cities, industries),
    followed by a cancel button.
    """
    rows = [
        [KeyboardButton(text=option) for option in row]
        for row in _chunk(list(options), columns)
    ]
    rows.append([KeyboardButton(text=BTN_CANCEL)])

    keyboard = ReplyKeyboardMarkup(keyboard=rows, resize_keyboard=True, one_time_keyboard=True)
    return keyboard

def get_phone_keyboard():
    """
    Returns keyboard to request phone number contact.
    Typing the number by hand is also accepted.
    """
    keyboard = ReplyKeyboardMarkup(keyboard=[
        [KeyboardButton(text="📱 Share Phone Number", request_contact=True)],
        [KeyboardButton(text=BTN_CANCEL)]
    ], resize_keyboard=True)
    return keyboard

def get_review_keyboard():
    rows = [[InlineKeyboardButton(text="✅ Submit", callback_data="submit")]]
    edit_buttons = [
        InlineKeyboardButton(text=f"✏️ {label}", callback_data=f"edit:{key}")
        for key, label in EDITABLE_FIELDS.items()
    ]
    rows.extend(_chunk(edit_buttons, 2))
    rows.append([InlineKeyboardButton(text=BTN_CANCEL, callback_data="cancel")])
    return InlineKeyboardMarkup(inline_keyboard=rows)

def get_login_keyboard():
    url = f"{WEB_BASE_URL}{LOGIN_PATH}"
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=BTN_LOGIN, url=url)]
    ])
