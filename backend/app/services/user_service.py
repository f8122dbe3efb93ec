"""User Service — mirrors identity-provider accounts into the users table.

Invariants:
    - One local row per identity subject (external_id)
    - An existing row is returned as-is; the first sync creates it from token claims
    - A concurrent first sync that loses the insert race returns the winner's row

Design Decisions:
    - Claims read from both OIDC names (given_name) and provider-specific names
      (first_name): tokens from either template sync the same way
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import AuthenticatedIdentity
from app.core.errors import ConflictError, InvalidInputError
from app.models.user import User
from app.schemas.user import UserProfile

logger = logging.getLogger(__name__)


def _claim(claims: dict, *names: str) -> str | None:
    for name in names:
        value = claims.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class SqlUserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _by_external_id(self, external_id: str) -> User | None:
        result = await self.db.execute(
            select(User).where(User.external_id == external_id),
        )
        return result.scalar_one_or_none()

    async def sync_from_identity(self, identity: AuthenticatedIdentity) -> UserProfile:
        existing = await self._by_external_id(identity.user_id)
        if existing:
            return UserProfile.model_validate(existing)

        claims = identity.claims
        email = _claim(claims, "email", "email_address", "primary_email")
        if not email:
            raise InvalidInputError(
                "Identity has no email address", field="email",
            )
        user = User(
            external_id=identity.user_id,
            email=email.lower(),
            first_name=_claim(claims, "given_name", "first_name"),
            last_name=_claim(claims, "family_name", "last_name"),
            phone=_claim(claims, "phone_number", "phone"),
            role=identity.role.value,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            existing = await self._by_external_id(identity.user_id)
            if existing:
                return UserProfile.model_validate(existing)
            raise ConflictError("Email already belongs to another account")
        await self.db.refresh(user)
        logger.info(f"Created user {user.id}", extra={"user_id": identity.user_id})
        return UserProfile.model_validate(user)
