"""
HTTP Account Repository

Concrete implementation of AccountRepository over ``/api/user/auth``.
"""

import logging
from typing import Any, Dict, List

from kampyn.domain.entities.vendor_entity import College
from kampyn.domain.repositories.account_repository import AccountRepository
from kampyn.infrastructure.http.backend_client import BackendClient
from kampyn.infrastructure.utilities.exceptions import BackendError, UnverifiedAccountError

AUTH_PREFIX = "/api/user/auth"


class HttpAccountRepository(AccountRepository):
    """Account lifecycle endpoints owned by the backend"""

    def __init__(self, client: BackendClient):
        self._client = client
        self._logger = logging.getLogger(self.__class__.__name__)

    async def login(self, identifier: str, password: str) -> Dict[str, Any]:
        try:
            return await self._client.post(
                f"{AUTH_PREFIX}/login", json={"identifier": identifier, "password": password}
            )
        except BackendError as e:
            redirect_to = e.payload.get("redirectTo")
            if e.status_code == 400 and redirect_to:
                raise UnverifiedAccountError(redirect_to) from e
            raise

    async def signup(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._client.post(f"{AUTH_PREFIX}/signup", json=payload)

    async def verify_otp(self, email: str, otp: str) -> Dict[str, Any]:
        return await self._client.post(
            f"{AUTH_PREFIX}/otpverification", json={"email": email, "otp": otp}
        )

    async def refresh(self) -> Dict[str, Any]:
        return await self._client.get(f"{AUTH_PREFIX}/refresh")

    async def forgot_password(self, identifier: str) -> Dict[str, Any]:
        return await self._client.post(
            f"{AUTH_PREFIX}/forgotpassword", json={"identifier": identifier}
        )

    async def reset_password(self, email: str, password: str) -> Dict[str, Any]:
        return await self._client.post(
            f"{AUTH_PREFIX}/resetpassword", json={"email": email, "password": password}
        )

    async def get_current_user(self) -> Dict[str, Any]:
        return await self._client.get(f"{AUTH_PREFIX}/user")

    async def list_colleges(self) -> List[College]:
        payload = await self._client.get(f"{AUTH_PREFIX}/list")
        # The directory is returned as a bare array
        return [College.from_dict(raw) for raw in payload or []]
