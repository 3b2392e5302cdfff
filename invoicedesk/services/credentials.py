# invoicedesk/services/credentials.py

"""
Credentials sign-in, the collaborator behind the session gate.

Failures are raised as members of the :class:`AuthError` family. Anything
else (a broken database, say) surfaces as its own exception type.
"""

import logging
import uuid
from typing import Any, Dict, Mapping

from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from werkzeug.security import check_password_hash, generate_password_hash

from invoicedesk.db.schema import users

logger = logging.getLogger(__name__)


class AuthError(Exception):
    type = "AuthError"


class CredentialsSignin(AuthError):
    type = "CredentialsSignin"


class InvalidProvider(AuthError):
    type = "InvalidProvider"


def add_user(engine: Engine, name: str, email: str, password: str) -> str:
    user_id = str(uuid.uuid4())
    with engine.begin() as conn:
        conn.execute(
            insert(users).values(
                id=user_id,
                name=name,
                email=email.strip().lower(),
                password=generate_password_hash(password),
            )
        )
    return user_id


class CredentialsSignIn:
    def __init__(self, engine: Engine):
        self.engine = engine

    def sign_in(self, provider: str, form_data: Mapping[str, Any]) -> Dict[str, str]:
        if provider != "credentials":
            raise InvalidProvider(f"Unsupported sign-in provider {provider!r}")

        email = form_data.get("email")
        password = form_data.get("password")
        if not isinstance(email, str) or not isinstance(password, str) or not password:
            raise CredentialsSignin("Email and password are required")

        with self.engine.connect() as conn:
            row = conn.execute(
                select(users.c.id, users.c.name, users.c.email, users.c.password)
                .where(users.c.email == email.strip().lower())
            ).mappings().first()

        if row is None or not check_password_hash(row["password"], password):
            logger.info("Rejected sign-in for %s", email)
            raise CredentialsSignin("Invalid email or password")

        return {"id": row["id"], "name": row["name"], "email": row["email"]}
