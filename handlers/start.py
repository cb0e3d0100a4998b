from aiogram import Router, F, types
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from keyboards import get_start_keyboard, get_login_keyboard, BTN_LOGIN
import logging

router = Router()
logger = logging.getLogger(__name__)

@router.message(CommandStart())
async def cmd_start(message: types.Message, state: FSMContext):
    """
    /start handler. Drops any half-filled form and offers
    to register a company or log in to an existing account.
    """
    logger.info(f"User {message.from_user.id} opened the bot")
    await state.clear()
    await message.answer(
        "👋 Welcome! Create an account for your company, "
        "or log in if you already have one.",
        reply_markup=get_start_keyboard()
    )

@router.message(Command("login"))
@router.message(F.text == BTN_LOGIN)
async def navigate_to_login(message: types.Message, state: FSMContext):
    """
    Sends the link to the company login page.
    """
    await state.clear()
    await message.answer(
        "Already have an account? Log in here:",
        reply_markup=get_login_keyboard()
    )
