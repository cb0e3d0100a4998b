from html import escape

from forms import RegistrationFormState

NOT_SET = "—"


def format_registration_review(form: RegistrationFormState) -> str:
    """
    Formats the collected form as an HTML summary for the review step.
    Passwords are never echoed back; only whether they were entered.
    """
    def show(value: str) -> str:
        return escape(value) if value else NOT_SET

    password = "••••••••" if form.password else NOT_SET

    return (
        f"📋 <b>Please review your company account</b>\n\n"
        f"🏢 <b>Company Name</b>: {show(form.company_name)}\n"
        f"👤 <b>Contact Person</b>: {show(form.contact_person_full_name)}\n"
        f"🌍 <b>Country</b>: {show(form.country)}\n"
        f"🏙 <b>City</b>: {show(form.city)}\n"
        f"📱 <b>Phone</b>: {show(form.phone_number)}\n"
        f"🏭 <b>Industry</b>: {show(form.industry)}\n"
        f"✉️ <b>Email</b>: {show(form.email)}\n"
        f"🔒 <b>Password</b>: {password}\n\n"
        f"Press ✅ Submit to create the account, or edit any field."
    )
