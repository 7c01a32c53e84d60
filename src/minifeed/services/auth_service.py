"""
minifeed.services.auth_service

Login and registration.

Responsibilities:
- Verify credentials (with timing equalization for unknown usernames).
- Read the user's roles via an explicit join and issue a signed token.
- Register users with the default BASIC role; duplicates are conflicts.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from minifeed.auth.jwt import IssuedToken, TokenIssuer
from minifeed.auth.models import RoleName
from minifeed.auth.passwords import dummy_hash, hash_password, verify_password
from minifeed.db.models import User
from minifeed.db.repositories.roles import RoleRepo
from minifeed.db.repositories.users import UserRepo
from minifeed.errors import AuthenticationError, ConflictError
from minifeed.observability.logging import get_logger

log = get_logger(__name__)

BAD_CREDENTIALS_DETAIL = "user or password is invalid"


@dataclass(frozen=True, slots=True)
class RegisteredUser:
    id: str
    username: str


class AuthService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        issuer: TokenIssuer,
        bcrypt_rounds: int,
    ) -> None:
        self._session = session
        self._issuer = issuer
        self._rounds = bcrypt_rounds
        self._users = UserRepo(session)
        self._roles = RoleRepo(session)

    async def authenticate(self, username: str, password: str) -> User:
        user = await self._users.get_by_username(username)
        if user is None:
            # Same bcrypt cost as a real check so timing does not reveal unknown names.
            verify_password(password, dummy_hash(self._rounds))
            log.info("login_failed", reason="unknown_user")
            raise AuthenticationError(BAD_CREDENTIALS_DETAIL)
        if not verify_password(password, user.password_hash):
            log.info("login_failed", reason="bad_password", user_id=str(user.id))
            raise AuthenticationError(BAD_CREDENTIALS_DETAIL)
        return user

    async def login(self, username: str, password: str) -> IssuedToken:
        user = await self.authenticate(username, password)
        role_names = await self._users.role_names_for(user.id)
        issued = self._issuer.issue(subject=str(user.id), role_names=role_names)
        log.info("login_succeeded", user_id=str(user.id), roles=role_names)
        return issued

    async def register(self, username: str, password: str) -> RegisteredUser:
        if await self._users.get_by_username(username) is not None:
            raise ConflictError("Username already exists")

        basic = await self._roles.get_by_name(RoleName.basic.value)
        if basic is None:
            raise RuntimeError("BASIC role is not seeded")

        try:
            user = await self._users.add(
                username=username,
                password_hash=hash_password(password, rounds=self._rounds),
                roles=[basic],
            )
            await self._session.commit()
        except IntegrityError as e:
            # A concurrent registration won the unique constraint.
            await self._session.rollback()
            raise ConflictError("Username already exists") from e

        log.info("user_registered", user_id=str(user.id))
        return RegisteredUser(id=str(user.id), username=user.username)


# --- Module Notes -----------------------------------------------------------
# Unknown username and wrong password share one error detail so the response
# never reveals which usernames exist.
