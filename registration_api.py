import asyncio
import logging
from typing import Optional

import aiohttp

from config import API_BASE_URL, REGISTER_PATH
from forms import RegistrationFormState

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Base class for failed registration submissions."""


class RegistrationRejected(RegistrationError):
    """The endpoint answered with a non-success status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status


class RegistrationNetworkError(RegistrationError):
    """The request never got an HTTP answer."""


async def _read_error_message(resp: aiohttp.ClientResponse) -> str:
    try:
        data = await resp.json(content_type=None)
    except (aiohttp.ContentTypeError, ValueError):
        data = None

    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"Request failed with status {resp.status}"


async def _post_registration(session: aiohttp.ClientSession, url: str, payload: dict) -> dict:
    async with session.post(
        url,
        json=payload,
        headers={"Content-Type": "application/json"},
    ) as resp:
        if not 200 <= resp.status < 300:
            message = await _read_error_message(resp)
            logger.warning(f"Registration rejected: status={resp.status} message={message!r}")
            raise RegistrationRejected(message, resp.status)

        try:
            result = await resp.json(content_type=None)
        except ValueError:
            result = None
        return result if isinstance(result, dict) else {}


async def register_company(
    form: RegistrationFormState,
    session: Optional[aiohttp.ClientSession] = None,
    base_url: str = API_BASE_URL,
) -> dict:
    """
    POST the form to the registration endpoint.

    Returns the decoded success body. Raises RegistrationRejected when the
    server refuses the account and RegistrationNetworkError when the request
    fails in transport.
    """
    url = f"{base_url}{REGISTER_PATH}"
    payload = form.to_payload()
    logger.info(f"📤 Registering company {form.company_name!r} at {url}")

    try:
        if session is not None:
            return await _post_registration(session, url, payload)
        async with aiohttp.ClientSession() as own_session:
            return await _post_registration(own_session, url, payload)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        logger.error(f"Registration request failed: {e}")
        raise RegistrationNetworkError(str(e)) from e
