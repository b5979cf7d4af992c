from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import config
from app.exceptions.errors import unauthorized
from app.models.user import User


# Створення JWT токена
def create_access_token(user: User) -> str:
    """Створює JWT-токен з id користувача."""
    expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "id": str(user.id),
        "email": user.email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }

    return jwt.encode(to_encode, config.SECRET_KEY, algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> int:
    """Розшифровує JWT-токен та повертає id користувача"""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.ALGORITHM])
    except ExpiredSignatureError:
        raise unauthorized("Token has expired")
    except JWTError:
        raise unauthorized("Could not validate token")

    user_id = payload.get("id")
    if user_id is None or not str(user_id).isdigit():
        raise unauthorized("Could not validate token")
    return int(user_id)
