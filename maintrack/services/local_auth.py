"""Auth service backed by the local ``users`` table.

Passwords are stored as bcrypt hashes. Sign-up creates an unconfirmed account
and issues a confirmation token; there is no mail transport, so the token is
written to the log and must be redeemed through ``confirm_email``.
"""
import logging
import re
import secrets
import uuid
from datetime import datetime, timezone

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from maintrack.database import async_session
from maintrack.models.user import User
from maintrack.schemas.session import EMPTY_SESSION, ActiveSession, Session
from maintrack.services.interfaces import HandlerSubscription, SessionHandler
from maintrack.utils.result import Err, Ok, Result

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
EMAIL_NOT_CONFIRMED = "Email not confirmed"
USER_ALREADY_REGISTERED = "User already registered"
INVALID_EMAIL = "Unable to validate email address: invalid format"
WEAK_PASSWORD = "Password should be at least 6 characters"
PASSWORD_TOO_LONG = "Password cannot be longer than 72 bytes"
INVALID_TOKEN = "Invalid or expired confirmation token"
AUTH_UNAVAILABLE = "Authentication service unavailable"

MIN_PASSWORD_LENGTH = 6
# bcrypt refuses anything longer
MAX_PASSWORD_BYTES = 72

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalAuthService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] = async_session):
        self._session_factory = session_factory
        self._handlers: list[SessionHandler] = []
        self._current: Session = EMPTY_SESSION

    @property
    def current_session(self) -> Session:
        return self._current

    async def get_current_session(self) -> Result[Session]:
        return Ok(self._current)

    async def sign_in(self, email: str, password: str) -> Result[None]:
        email = _normalize_email(email)
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            return Err(INVALID_CREDENTIALS)
        try:
            async with self._session_factory() as db:
                result = await db.execute(select(User).where(User.email == email))
                user = result.scalars().first()
        except SQLAlchemyError:
            logger.exception("Sign-in lookup failed for %s", email)
            return Err(AUTH_UNAVAILABLE)

        if user is None or not bcrypt.checkpw(password.encode(), user.password_hash.encode()):
            return Err(INVALID_CREDENTIALS)
        if not user.confirmed:
            return Err(EMAIL_NOT_CONFIRMED)

        logger.info("User %s signed in", user.id)
        await self._set_session(ActiveSession(user_id=user.id, email=user.email))
        return Ok()

    async def sign_up(self, email: str, password: str) -> Result[None]:
        email = _normalize_email(email)
        if not _EMAIL_RE.match(email):
            return Err(INVALID_EMAIL)
        if len(password) < MIN_PASSWORD_LENGTH:
            return Err(WEAK_PASSWORD)
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            return Err(PASSWORD_TOO_LONG)

        token = secrets.token_urlsafe(32)
        try:
            async with self._session_factory() as db:
                result = await db.execute(select(User).where(User.email == email))
                if result.scalars().first() is not None:
                    return Err(USER_ALREADY_REGISTERED)

                db.add(User(
                    id=str(uuid.uuid4()),
                    email=email,
                    password_hash=hash_password(password),
                    confirmed=0,
                    confirmation_token=token,
                    created_at=datetime.now(timezone.utc).isoformat(),
                ))
                await db.commit()
        except SQLAlchemyError:
            logger.exception("Sign-up failed for %s", email)
            return Err(AUTH_UNAVAILABLE)

        logger.info("Confirmation token for %s: %s", email, token)
        return Ok()

    async def confirm_email(self, token: str) -> Result[None]:
        try:
            async with self._session_factory() as db:
                result = await db.execute(select(User).where(User.confirmation_token == token))
                user = result.scalars().first()
                if user is None:
                    return Err(INVALID_TOKEN)

                user.confirmed = 1
                user.confirmation_token = None
                await db.commit()
                session = ActiveSession(user_id=user.id, email=user.email)
        except SQLAlchemyError:
            logger.exception("Email confirmation failed")
            return Err(AUTH_UNAVAILABLE)

        logger.info("User %s confirmed their email", session.user_id)
        await self._set_session(session)
        return Ok()

    async def sign_out(self) -> None:
        if self._current.is_active:
            logger.info("User %s signed out", self._current.user_id)
        await self._set_session(EMPTY_SESSION)

    def subscribe(self, handler: SessionHandler) -> HandlerSubscription:
        self._handlers.append(handler)
        return HandlerSubscription(self._handlers, handler)

    async def _set_session(self, session: Session) -> None:
        self._current = session
        for handler in list(self._handlers):
            try:
                await handler(session)
            except Exception:
                logger.exception("Session change handler failed")
