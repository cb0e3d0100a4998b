"""
Shared fixtures: an FSM context backed by in-memory storage and
factories for mocked Telegram messages and callback queries.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram.fsm.context import FSMContext
from aiogram.fsm.storage.base import StorageKey
from aiogram.fsm.storage.memory import MemoryStorage

from forms import RegistrationFormState

USER_ID = 42
STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def state():
    return FSMContext(
        storage=MemoryStorage(),
        key=StorageKey(bot_id=1, chat_id=USER_ID, user_id=USER_ID),
    )


@pytest.fixture
def make_message():
    def _make(text=None, contact=None):
        message = AsyncMock()
        message.text = text
        message.contact = contact
        message.from_user = MagicMock(id=USER_ID)
        return message
    return _make


@pytest.fixture
def make_callback():
    def _make(data):
        callback = AsyncMock()
        callback.data = data
        callback.from_user = MagicMock(id=USER_ID)
        callback.message = AsyncMock()
        return callback
    return _make


@pytest.fixture
def filled_form():
    return RegistrationFormState(
        company_name="Acme Ltd",
        contact_person_full_name="Jane Doe",
        country="France",
        city="Lyon",
        phone_number="+33612345678",
        industry="Manufacturing",
        email="jane@acme.test",
        password=STRONG_PASSWORD,
        re_write_password=STRONG_PASSWORD,
    )


def answered_texts(mock):
    """All texts passed to an AsyncMock's answer() calls."""
    return [call.args[0] for call in mock.answer.await_args_list if call.args]
