from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import config
from app.dependencies.database import get_db
from app.services.books_service import BookService
from app.services.reviews_service import ReviewService
from app.services.user_service import AuthService


def get_book_service(db: AsyncSession = Depends(get_db)) -> BookService:
    return BookService(db)


def get_review_service(db: AsyncSession = Depends(get_db)) -> ReviewService:
    return ReviewService(db, policy=config.REVIEW_POLICY)


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)
