from aiogram.fsm.state import State, StatesGroup

class CompanyRegistration(StatesGroup):
    """
    FSM States for the Company Registration Flow.
    One state per form field, in the order they are asked.
    """
    company_name = State()
    contact_person = State()
    country = State()
    city = State()
    phone = State()
    industry = State()
    email = State()
    password = State()
    rewrite_password = State()
    review = State()  # Summary with submit / edit buttons
