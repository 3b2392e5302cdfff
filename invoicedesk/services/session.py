# invoicedesk/services/session.py

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from invoicedesk.navigation import redirect
from invoicedesk.services.credentials import AuthError

logger = logging.getLogger(__name__)

SignIn = Callable[[str, Mapping[str, Any]], Any]


class AuthFailure(str, Enum):
    INVALID_CREDENTIALS = "Invalid credentials."
    UNKNOWN = "Something went wrong."


class SessionGate:
    """
    Exchange submitted credentials for a session.

    Success transfers control to the authenticated area. Authentication
    errors come back as an :class:`AuthFailure`; any other exception from
    the sign-in call is re-raised untouched.
    """

    def __init__(self, sign_in: SignIn, dashboard_path: str):
        self.sign_in = sign_in
        self.dashboard_path = dashboard_path

    def authenticate(self, prev_state: Optional[AuthFailure], form_data: Mapping[str, Any]) -> AuthFailure:
        try:
            self.sign_in("credentials", form_data)
        except AuthError as exc:
            if exc.type == "CredentialsSignin":
                return AuthFailure.INVALID_CREDENTIALS
            logger.warning("Sign-in failed with %s: %s", exc.type, exc)
            return AuthFailure.UNKNOWN

        redirect(self.dashboard_path)
