from aiogram import Router, F, types
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.fsm.state import State
from aiogram.types import ReplyKeyboardRemove
from states import CompanyRegistration
from keyboards import (
    get_cancel_keyboard, get_options_keyboard, get_phone_keyboard,
    get_review_keyboard, get_start_keyboard, get_login_keyboard,
    BTN_REGISTER, BTN_CANCEL
)
from directory import country_options, city_options, industry_options, dial_code
from forms import (
    RegistrationFormState, PASSWORD_SYMBOLS, clear_form, update_field,
    change_country, change_city, change_industry, change_phone, validate_for_submit
)
from registration_api import register_company, RegistrationRejected, RegistrationNetworkError
from utils.formatter import format_registration_review
from utils.phone import normalize_phone
import logging
import re

router = Router()
logger = logging.getLogger(__name__)

FORM_KEY = "form"
EDITING_KEY = "editing"

EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")

MSG_SUCCESS = "🎉 Sign up successful!"
MSG_NETWORK_ERROR = "❌ Sign up failed: network error. Please check your connection and try again."
MSG_BUSY = "⏳ Registration is already being sent, please wait..."
MSG_STALE_REVIEW = "This form is no longer active."

# Review "edit:<key>" callbacks → the state that re-asks that field
EDIT_TARGETS = {
    "companyName": CompanyRegistration.company_name,
    "contactPersonFullName": CompanyRegistration.contact_person,
    "country": CompanyRegistration.country,
    "city": CompanyRegistration.city,
    "phoneNumber": CompanyRegistration.phone,
    "industry": CompanyRegistration.industry,
    "email": CompanyRegistration.email,
    "password": CompanyRegistration.password,
}

# Users whose submission is currently awaiting the endpoint
_submitting: set = set()


# ── Form Storage ──────────────────────────────────────────────────────────

async def get_form(state: FSMContext) -> RegistrationFormState:
    data = await state.get_data()
    return RegistrationFormState.from_payload(data.get(FORM_KEY))

async def save_form(state: FSMContext, form: RegistrationFormState):
    await state.update_data(**{FORM_KEY: form.to_payload()})


# ── Prompts ───────────────────────────────────────────────────────────────

async def ask(message: types.Message, state: FSMContext, target: State):
    """
    Moves the conversation to `target` and asks for that field.
    """
    form = await get_form(state)

    if target == CompanyRegistration.city and not form.country:
        await message.answer("🌍 Please choose a country first.")
        target = CompanyRegistration.country

    if target == CompanyRegistration.city and not city_options(form.country):
        await message.answer(f"ℹ️ No cities are listed for {form.country}.")
        await advance(message, state, CompanyRegistration.phone)
        return

    await state.set_state(target)

    if target == CompanyRegistration.company_name:
        await message.answer("🏢 Enter your company name:", reply_markup=get_cancel_keyboard())
    elif target == CompanyRegistration.contact_person:
        await message.answer("👤 Enter the contact person's full name:", reply_markup=get_cancel_keyboard())
    elif target == CompanyRegistration.country:
        await message.answer("🌍 Select your country:", reply_markup=get_options_keyboard(country_options()))
    elif target == CompanyRegistration.city:
        await message.answer(
            f"🏙 Select your city in {form.country}:",
            reply_markup=get_options_keyboard(city_options(form.country))
        )
    elif target == CompanyRegistration.phone:
        code = dial_code(form.country)
        hint = f" (country code +{code})" if code else ""
        await message.answer(
            f"📱 Share your phone number or type it{hint}:",
            reply_markup=get_phone_keyboard()
        )
    elif target == CompanyRegistration.industry:
        await message.answer("🏭 Select your industry:", reply_markup=get_options_keyboard(industry_options()))
    elif target == CompanyRegistration.email:
        await message.answer("✉️ Enter your email:", reply_markup=get_cancel_keyboard())
    elif target == CompanyRegistration.password:
        await message.answer(
            "🔒 Choose a password.\n"
            f"At least 8 characters with an uppercase letter, a lowercase letter, "
            f"a number and one of {PASSWORD_SYMBOLS}",
            reply_markup=get_cancel_keyboard()
        )
    elif target == CompanyRegistration.rewrite_password:
        await message.answer("🔒 Re-write the password:", reply_markup=get_cancel_keyboard())

async def show_review(message: types.Message, state: FSMContext):
    form = await get_form(state)
    await state.update_data(**{EDITING_KEY: False})
    await state.set_state(CompanyRegistration.review)
    await message.answer("✅ Almost done.", reply_markup=ReplyKeyboardRemove())
    await message.answer(
        format_registration_review(form),
        reply_markup=get_review_keyboard(),
        parse_mode="HTML"
    )

async def advance(message: types.Message, state: FSMContext, next_state: State):
    """
    Asks the next field, or goes back to the review when a single
    field was being edited.
    """
    data = await state.get_data()
    if data.get(EDITING_KEY):
        await show_review(message, state)
    else:
        await ask(message, state, next_state)

async def forget_password_message(message: types.Message):
    try:
        await message.delete()
    except Exception as e:
        logger.warning(f"Could not delete password message: {e}")

async def drop_review_buttons(message: types.Message):
    try:
        await message.edit_reply_markup(reply_markup=None)
    except Exception as e:
        logger.warning(f"Could not remove review buttons: {e}")


# ── Entry / Exit ──────────────────────────────────────────────────────────

@router.message(Command("register"))
@router.message(F.text == BTN_REGISTER)
async def start_registration(message: types.Message, state: FSMContext):
    logger.info(f"User {message.from_user.id} started company registration")
    await state.clear()
    await save_form(state, clear_form())
    await ask(message, state, CompanyRegistration.company_name)

@router.message(StateFilter(CompanyRegistration), Command("cancel"))
@router.message(StateFilter(CompanyRegistration), F.text == BTN_CANCEL)
async def cancel_registration(message: types.Message, state: FSMContext):
    await state.clear()
    await message.answer("Registration cancelled.", reply_markup=get_start_keyboard())

@router.callback_query(CompanyRegistration.review, F.data == "cancel")
async def cancel_from_review(callback: types.CallbackQuery, state: FSMContext):
    await state.clear()
    await callback.message.answer("Registration cancelled.", reply_markup=get_start_keyboard())
    await callback.answer()


# ── Field Steps ───────────────────────────────────────────────────────────

@router.message(CompanyRegistration.company_name, F.text)
async def process_company_name(message: types.Message, state: FSMContext):
    value = message.text.strip()
    if not value:
        await message.answer("Company name cannot be empty.")
        return
    await save_form(state, update_field(await get_form(state), "companyName", value))
    await advance(message, state, CompanyRegistration.contact_person)

@router.message(CompanyRegistration.contact_person, F.text)
async def process_contact_person(message: types.Message, state: FSMContext):
    value = message.text.strip()
    if not value:
        await message.answer("Contact person's name cannot be empty.")
        return
    await save_form(state, update_field(await get_form(state), "contactPersonFullName", value))
    await advance(message, state, CompanyRegistration.country)

@router.message(CompanyRegistration.country, F.text)
async def process_country(message: types.Message, state: FSMContext):
    """
    Sets the country. A default city is picked from the new country's list,
    so a city left over from another country never survives the change.
    """
    country = message.text.strip()
    if country not in country_options():
        await message.answer("Please select a country using the keyboard below.")
        return

    form = change_country(await get_form(state), country)
    await save_form(state, form)

    data = await state.get_data()
    if data.get(EDITING_KEY):
        await show_review(message, state)
    else:
        await ask(message, state, CompanyRegistration.city)

@router.message(CompanyRegistration.city, F.text)
async def process_city(message: types.Message, state: FSMContext):
    form = await get_form(state)
    city = message.text.strip()
    if city not in city_options(form.country):
        await message.answer(f"Please select a city in {form.country} using the keyboard below.")
        return
    await save_form(state, change_city(form, city))
    await advance(message, state, CompanyRegistration.phone)

@router.message(CompanyRegistration.phone, F.contact)
async def process_phone_contact(message: types.Message, state: FSMContext):
    await _save_phone(message, state, message.contact.phone_number, international=True)

@router.message(CompanyRegistration.phone, F.text)
async def process_phone_text(message: types.Message, state: FSMContext):
    await _save_phone(message, state, message.text)

async def _save_phone(message: types.Message, state: FSMContext, raw: str, international: bool = False):
    form = await get_form(state)
    phone = normalize_phone(raw, dial_code(form.country), international=international)
    if phone is None:
        await message.answer("⚠️ That doesn't look like a phone number. Please try again.")
        return
    await save_form(state, change_phone(form, phone))
    await advance(message, state, CompanyRegistration.industry)

@router.message(CompanyRegistration.industry, F.text)
async def process_industry(message: types.Message, state: FSMContext):
    industry = message.text.strip()
    if industry not in industry_options():
        await message.answer("Please select an industry using the keyboard below.")
        return
    await save_form(state, change_industry(await get_form(state), industry))
    await advance(message, state, CompanyRegistration.email)

@router.message(CompanyRegistration.email, F.text)
async def process_email(message: types.Message, state: FSMContext):
    email = message.text.strip()
    if not EMAIL_PATTERN.fullmatch(email):
        await message.answer("⚠️ Please enter a valid email address.")
        return
    await save_form(state, update_field(await get_form(state), "email", email))
    await advance(message, state, CompanyRegistration.password)

@router.message(CompanyRegistration.password, F.text)
async def process_password(message: types.Message, state: FSMContext):
    """
    Stores the password as typed; strength is checked on submit.
    Always followed by the re-write step, also when editing.
    """
    password = message.text
    await forget_password_message(message)
    await save_form(state, update_field(await get_form(state), "password", password))
    await ask(message, state, CompanyRegistration.rewrite_password)

@router.message(CompanyRegistration.rewrite_password, F.text)
async def process_rewrite_password(message: types.Message, state: FSMContext):
    password = message.text
    await forget_password_message(message)
    await save_form(state, update_field(await get_form(state), "reWritePassword", password))
    await show_review(message, state)


# ── Review ────────────────────────────────────────────────────────────────

@router.callback_query(CompanyRegistration.review, F.data.startswith("edit:"))
async def edit_field(callback: types.CallbackQuery, state: FSMContext):
    key = callback.data.split(":", 1)[1]
    target = EDIT_TARGETS.get(key)
    if target is None:
        await callback.answer("Unknown field.")
        return

    await state.update_data(**{EDITING_KEY: True})
    await ask(callback.message, state, target)
    await callback.answer()

@router.callback_query(CompanyRegistration.review, F.data == "submit")
async def submit_registration(callback: types.CallbackQuery, state: FSMContext):
    """
    Validates the form and sends it to the registration endpoint.
    The form is reset only when the server accepts it.
    """
    user_id = callback.from_user.id
    if user_id in _submitting:
        await callback.answer(MSG_BUSY)
        return
    _submitting.add(user_id)

    try:
        form = await get_form(state)
        error = validate_for_submit(form)
        if error:
            await callback.message.answer(f"⚠️ {error}")
            return

        try:
            result = await register_company(form)
        except RegistrationRejected as e:
            logger.warning(f"Registration for user {user_id} rejected: {e.message}")
            await callback.message.answer(f"❌ Sign up failed: {e.message}")
        except RegistrationNetworkError as e:
            logger.error(f"Registration for user {user_id} failed in transport: {e}")
            await callback.message.answer(MSG_NETWORK_ERROR)
        else:
            logger.info(f"Company registered for user {user_id}: {result}")
            await state.clear()
            await drop_review_buttons(callback.message)
            await callback.message.answer(MSG_SUCCESS, reply_markup=get_login_keyboard())
    finally:
        _submitting.discard(user_id)
        await callback.answer()

@router.callback_query(F.data.in_({"submit", "cancel"}))
@router.callback_query(F.data.startswith("edit:"))
async def stale_review(callback: types.CallbackQuery):
    """
    Buttons of a review that is no longer active (submitted or cancelled).
    """
    await callback.answer(MSG_STALE_REVIEW)
