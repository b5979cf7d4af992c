from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.book import (
    AUTHOR_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    GENRE_MAX_LENGTH,
    MIN_PUBLISHED_YEAR,
    TITLE_MAX_LENGTH,
)
from app.models.review import MAX_RATING, MIN_RATING, REVIEW_TEXT_MAX_LENGTH

DEFAULT_PAGE_SIZE = 5
MAX_PAGE_SIZE = 50
# (page - 1) * limit має вміщатися в 32-бітний OFFSET
MAX_PAGE = 2**31 // MAX_PAGE_SIZE


# Базова схема для автоматичної конвертації в camelCase
class BaseSchema(BaseModel):
    class Config:
        @staticmethod
        def alias_generator(string: str) -> str:
            """Конвертує snake_case → camelCase"""
            return "".join(
                word.capitalize() if i else word
                for i, word in enumerate(string.split("_"))
            )

        populate_by_name = True
        from_attributes = True
        str_strip_whitespace = True


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, name: str):
        name = name.strip()
        if not name:
            raise ValueError("Name is required")
        return name


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SortOption(str, PyEnum):
    NEWEST = "newest"
    OLDEST = "oldest"
    YEAR_DESC = "year-desc"
    YEAR_ASC = "year-asc"
    TITLE_ASC = "title-asc"
    TITLE_DESC = "title-desc"
    RATING_DESC = "rating-desc"
    RATING_ASC = "rating-asc"


class BookListParams(BaseSchema):
    page: int = Field(1, ge=1, le=MAX_PAGE, description="Номер сторінки (починається з 1)")
    limit: int = Field(
        DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        description="Кількість книг на сторінку (1-50)",
    )
    search: Optional[str] = None
    genre: Optional[str] = None
    sort_by: SortOption = SortOption.NEWEST

    @field_validator("search", "genre")
    @classmethod
    def empty_to_none(cls, value: Optional[str]):
        return value or None

    @field_validator("sort_by", mode="before")
    @classmethod
    def fallback_to_newest(cls, value):
        """Невідоме або порожнє значення сортування → newest"""
        if isinstance(value, SortOption):
            return value
        try:
            return SortOption(value)
        except ValueError:
            return SortOption.NEWEST


def _check_published_year(year: Optional[int]):
    if year is None:
        return year
    current_year = datetime.now().year
    if not MIN_PUBLISHED_YEAR <= year <= current_year:
        raise ValueError(
            f"Published year must be between {MIN_PUBLISHED_YEAR} and {current_year}",
        )
    return year


class BookCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    author: str = Field(..., min_length=1, max_length=AUTHOR_MAX_LENGTH)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    genre: str = Field(..., min_length=1, max_length=GENRE_MAX_LENGTH)
    published_year: int

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, year: int):
        return _check_published_year(year)


class BookUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    author: Optional[str] = Field(None, min_length=1, max_length=AUTHOR_MAX_LENGTH)
    description: Optional[str] = Field(
        None,
        min_length=1,
        max_length=DESCRIPTION_MAX_LENGTH,
    )
    genre: Optional[str] = Field(None, min_length=1, max_length=GENRE_MAX_LENGTH)
    published_year: Optional[int] = None

    @field_validator("published_year")
    @classmethod
    def validate_published_year(cls, year: Optional[int]):
        return _check_published_year(year)


class ReviewCreate(BaseSchema):
    book_id: int
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    review_text: str = Field(..., min_length=1, max_length=REVIEW_TEXT_MAX_LENGTH)


class ReviewUpdate(BaseSchema):
    rating: Optional[int] = Field(None, ge=MIN_RATING, le=MAX_RATING)
    review_text: Optional[str] = Field(
        None,
        min_length=1,
        max_length=REVIEW_TEXT_MAX_LENGTH,
    )
