import logging
from typing import Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.exceptions.errors import conflict, not_found, unauthorized
from app.exceptions.serialization import serialize_user
from app.models.user import User
from app.oauth2 import hash_password, verify_password
from app.schemas.schemas import LoginRequest, RegisterRequest
from app.utils import create_access_token, decode_access_token

logger = logging.getLogger("app")


def _token_from_request(request: Request) -> Optional[str]:
    authorization = request.headers.get("Authorization", "")
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get("access_token")


# Отримати id користувача з JWT (заголовок Authorization або кука)
async def get_current_user_id(request: Request) -> int:
    token = _token_from_request(request)
    if not token:
        raise unauthorized("Not authenticated")
    return decode_access_token(token)


class AuthService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: int) -> dict:
        user = await self.db.get(User, user_id)
        if not user:
            raise not_found("User not found")
        return serialize_user(user)

    async def register(self, user_data: RegisterRequest) -> dict:
        if await self.get_user_by_email(user_data.email):
            raise conflict("User already exists with this email")

        user = User(
            name=user_data.name,
            email=user_data.email.lower(),
            hashed_password=hash_password(user_data.password),
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user.id} registered")
        return {"token": create_access_token(user), "user": serialize_user(user)}

    async def login(self, login_data: LoginRequest) -> dict:
        user = await self.get_user_by_email(login_data.email)
        if not user or not verify_password(login_data.password, user.hashed_password):
            raise unauthorized("Invalid email or password")

        return {"token": create_access_token(user), "user": serialize_user(user)}
