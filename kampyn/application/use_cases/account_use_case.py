"""
Account Use Case

Thin client for the backend's account lifecycle. The backend issues and
checks tokens; this side validates input and keeps the token it was given.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from kampyn.domain.entities.vendor_entity import College
from kampyn.domain.repositories.account_repository import AccountRepository
from kampyn.domain.repositories.session_store import SessionStore
from kampyn.domain.value_objects.phone_number import PhoneNumber
from kampyn.infrastructure.utilities.constants import ValidationSettings
from kampyn.infrastructure.utilities.exceptions import (
    AuthenticationError,
    ValidationError,
    validate_and_raise,
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_PATTERN = re.compile(rf"^\d{{{ValidationSettings.OTP_LENGTH}}}$")


def password_problems(password: str) -> List[str]:
    """Unmet password rules; an empty list means the password is acceptable"""
    problems = []
    if len(password) < ValidationSettings.MIN_PASSWORD_LENGTH:
        problems.append(f"at least {ValidationSettings.MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        problems.append("an uppercase letter")
    if not re.search(r"[a-z]", password):
        problems.append("a lowercase letter")
    if not re.search(r"\d", password):
        problems.append("a digit")
    if not any(char in ValidationSettings.PASSWORD_SPECIAL_CHARACTERS for char in password):
        problems.append(f"one of {ValidationSettings.PASSWORD_SPECIAL_CHARACTERS}")
    if re.search(r"\s", password):
        problems.append("no whitespace")
    return problems


@dataclass
class SignupRequest:
    full_name: str
    email: str
    phone: str
    gender: str
    password: str
    confirm_password: str
    uni_id: str


class AccountUseCase:
    """Use case for login, signup and password recovery"""

    def __init__(self, account_repository: AccountRepository, session_store: SessionStore):
        self._account_repository = account_repository
        self._session_store = session_store
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def is_logged_in(self) -> bool:
        return self._session_store.get() is not None

    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        """
        Log in and keep the issued token.

        Raises:
            UnverifiedAccountError: the account still needs OTP verification
        """
        validate_and_raise(bool(identifier and identifier.strip()), ValidationError, "Email or phone is required", "identifier")
        validate_and_raise(bool(password), ValidationError, "Password is required", "password")

        payload = await self._account_repository.login(identifier.strip(), password)
        token = payload.get("token")
        if not token:
            raise AuthenticationError("Login response did not include a token")
        self._session_store.set(token)
        self._logger.info("🔑 LOGGED IN: %s", identifier.strip())
        return payload

    def logout(self):
        self._session_store.clear()
        self._logger.info("👋 LOGGED OUT")

    async def refresh(self) -> bool:
        """Renew the stored token; a rejected token is forgotten"""
        if self._session_store.get() is None:
            return False
        try:
            payload = await self._account_repository.refresh()
        except AuthenticationError:
            self._logger.info("🔒 SESSION EXPIRED, clearing token")
            self._session_store.clear()
            return False
        token = payload.get("token")
        if token:
            self._session_store.set(token)
        return True

    async def signup(self, request: SignupRequest) -> Dict[str, Any]:
        validate_and_raise(bool(request.full_name.strip()), ValidationError, "Full name is required", "full_name")
        validate_and_raise(bool(EMAIL_PATTERN.match(request.email)), ValidationError, "Please enter a valid email address", "email")
        try:
            phone = PhoneNumber(request.phone)
        except ValueError as e:
            raise ValidationError("Please enter a valid phone number", field="phone") from e
        self._validate_password(request.password, request.confirm_password)
        validate_and_raise(bool(request.uni_id), ValidationError, "Please select your college", "uni_id")

        return await self._account_repository.signup(
            {
                "fullName": request.full_name.strip(),
                "email": request.email.strip(),
                "phone": phone.national_number,
                "gender": request.gender,
                "password": request.password,
                "uniID": request.uni_id,
            }
        )

    async def verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        otp = (otp or "").strip()
        validate_and_raise(
            bool(OTP_PATTERN.match(otp)),
            ValidationError,
            f"OTP must be exactly {ValidationSettings.OTP_LENGTH} digits",
            "otp",
        )
        payload = await self._account_repository.verify_otp(email, otp)
        token = payload.get("token")
        if token:
            self._session_store.set(token)
        return payload

    async def forgot_password(self, identifier: str) -> Dict[str, Any]:
        validate_and_raise(bool(identifier and identifier.strip()), ValidationError, "Email or phone is required", "identifier")
        return await self._account_repository.forgot_password(identifier.strip())

    async def reset_password(self, email: str, password: str, confirm_password: str) -> Dict[str, Any]:
        self._validate_password(password, confirm_password)
        return await self._account_repository.reset_password(email, password)

    async def current_user(self) -> Dict[str, Any]:
        return await self._account_repository.get_current_user()

    async def list_colleges(self) -> List[College]:
        return await self._account_repository.list_colleges()

    async def college_slug_for(self, university_id: str) -> Optional[str]:
        """Home page slug of a university, or None when it is not listed"""
        for college in await self.list_colleges():
            if college.college_id == university_id:
                return college.slug
        return None

    @staticmethod
    def _validate_password(password: str, confirm_password: str):
        problems = password_problems(password)
        if problems:
            raise ValidationError("Password must contain " + ", ".join(problems), field="password")
        if password != confirm_password:
            raise ValidationError("Passwords do not match", field="confirm_password")
