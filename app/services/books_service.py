import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions.book_filters import build_book_query
from app.exceptions.errors import forbidden, not_found
from app.exceptions.pagination import paginate_response
from app.exceptions.serialization import serialize_book, serialize_review
from app.models.book import Book
from app.models.review import Review
from app.schemas.schemas import BookCreate, BookListParams, BookUpdate, SortOption
from app.services.ratings import attach_ratings, rating_stats, sort_by_rating

logger = logging.getLogger("app")


class BookService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_book(self, book_id: int) -> Book:
        result = await self.db.execute(
            select(Book)
            .where(Book.id == book_id)
            .execution_options(populate_existing=True),
        )
        book = result.scalar_one_or_none()
        if not book:
            raise not_found("Book not found")
        return book

    async def _get_owned_book(self, book_id: int, user_id: int, action: str) -> Book:
        book = await self._get_book(book_id)
        if book.added_by != user_id:
            logger.warning(
                f"User {user_id} tried to {action} book {book_id} owned by {book.added_by}",
            )
            raise forbidden(f"Not authorized to {action} this book")
        return book

    async def list_books(
        self,
        params: BookListParams,
        owner_id: Optional[int] = None,
    ) -> dict:
        query = build_book_query(params, owner_id=owner_id)

        books = (await self.db.execute(query.statement)).scalars().all()
        total_books = await self.db.scalar(query.count_statement)

        books_with_stats = await attach_ratings(self.db, books)
        if query.rating_sort is not None:
            books_with_stats = sort_by_rating(
                books_with_stats,
                descending=query.rating_sort == SortOption.RATING_DESC,
            )

        items = [serialize_book(book, stats) for book, stats in books_with_stats]
        return paginate_response(total_books, query.page, query.limit, items)

    async def list_genres(self) -> List[str]:
        result = await self.db.execute(
            select(Book.genre).distinct().order_by(Book.genre),
        )
        return list(result.scalars().all())

    async def get_book_details(self, book_id: int) -> dict:
        book = await self._get_book(book_id)

        result = await self.db.execute(
            select(Review)
            .where(Review.book_id == book.id)
            .order_by(Review.created_at.desc(), Review.id.desc()),
        )
        reviews = result.scalars().all()

        data = serialize_book(book, rating_stats(review.rating for review in reviews))
        data["reviews"] = [serialize_review(review) for review in reviews]
        return data

    async def create_book(self, book_data: BookCreate, user_id: int) -> dict:
        new_book = Book(**book_data.model_dump(), added_by=user_id)
        self.db.add(new_book)
        await self.db.commit()

        logger.info(f"Book {new_book.id} created by user {user_id}")
        return serialize_book(await self._get_book(new_book.id))

    async def update_book(
        self,
        book_id: int,
        book_data: BookUpdate,
        user_id: int,
    ) -> dict:
        book = await self._get_owned_book(book_id, user_id, "update")

        for key, value in book_data.model_dump(
            exclude_unset=True,
            exclude_none=True,
        ).items():
            setattr(book, key, value)

        await self.db.commit()

        logger.info(f"Book {book_id} updated by user {user_id}")
        return serialize_book(await self._get_book(book_id))

    async def delete_book(self, book_id: int, user_id: int) -> None:
        book = await self._get_owned_book(book_id, user_id, "delete")

        await self.db.execute(delete(Review).where(Review.book_id == book.id))
        await self.db.delete(book)
        await self.db.commit()

        logger.info(f"Book {book_id} and its reviews deleted by user {user_id}")
