import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.config import ReviewPolicy
from app.exceptions.errors import forbidden, not_found
from app.exceptions.serialization import serialize_review
from app.models.book import Book
from app.models.review import Review, review_dedupe_key
from app.schemas.schemas import ReviewCreate, ReviewUpdate

logger = logging.getLogger("app")

UPSERT_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class ReviewService:
    """
    Відгуки до книг.

    Політика унікальності задається один раз при створенні сервісу:
    - SINGLE: один відгук на (користувач, книга), повторне надсилання оновлює його;
    - MULTIPLE: відгуків скільки завгодно, але не на власну книгу.
    """

    def __init__(self, db: AsyncSession, policy: ReviewPolicy = ReviewPolicy.SINGLE):
        self.db = db
        self.policy = policy

    async def _get_book(self, book_id: int) -> Book:
        book = await self.db.get(Book, book_id)
        if not book:
            raise not_found("Book not found")
        return book

    async def _get_review(self, review_id: int) -> Review:
        result = await self.db.execute(
            select(Review)
            .where(Review.id == review_id)
            .execution_options(populate_existing=True),
        )
        review = result.scalar_one_or_none()
        if not review:
            raise not_found("Review not found")
        return review

    async def _get_authored_review(
        self,
        review_id: int,
        user_id: int,
        action: str,
    ) -> Review:
        review = await self._get_review(review_id)
        if review.user_id != user_id:
            logger.warning(
                f"User {user_id} tried to {action} review {review_id} of user {review.user_id}",
            )
            raise forbidden(f"Not authorized to {action} this review")
        return review

    async def _find_user_review(self, book_id: int, user_id: int) -> Optional[Review]:
        result = await self.db.execute(
            select(Review)
            .where(Review.book_id == book_id, Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(1),
        )
        return result.scalars().first()

    async def _claim_legacy_review(self, book_id: int, user_id: int) -> None:
        """
        Рядки, створені під політикою MULTIPLE, мають dedupe_key = NULL,
        тож upsert їх не бачить. Найновішому з них присвоюємо ключ,
        щоб наступний upsert оновив його, а не створив дубль.
        """
        key = review_dedupe_key(user_id, book_id)
        if await self.db.scalar(select(Review.id).where(Review.dedupe_key == key)):
            return

        legacy_id = await self.db.scalar(
            select(Review.id)
            .where(
                Review.book_id == book_id,
                Review.user_id == user_id,
                Review.dedupe_key.is_(None),
            )
            .order_by(Review.created_at.desc(), Review.id.desc())
            .limit(1),
        )
        if legacy_id is None:
            return

        try:
            await self.db.execute(
                update(Review)
                .where(Review.id == legacy_id, Review.dedupe_key.is_(None))
                .values(dedupe_key=key),
            )
        except IntegrityError:
            # ключ щойно зайняв паралельний запит; upsert оновить його рядок
            await self.db.rollback()
            return

        logger.info(f"Legacy review {legacy_id} of user {user_id} claimed for book {book_id}")

    async def _upsert_review(self, review_data: ReviewCreate, user_id: int) -> Tuple[int, bool]:
        """Створює або оновлює відгук одним INSERT ... ON CONFLICT."""
        dialect = self.db.get_bind().dialect.name
        if dialect not in UPSERT_INSERTS:
            raise RuntimeError(f"Review upsert is not supported for '{dialect}'")

        stmt = UPSERT_INSERTS[dialect](Review).values(
            book_id=review_data.book_id,
            user_id=user_id,
            rating=review_data.rating,
            review_text=review_data.review_text,
            dedupe_key=review_dedupe_key(user_id, review_data.book_id),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["dedupe_key"],
            set_={
                "rating": stmt.excluded.rating,
                "review_text": stmt.excluded.review_text,
                "updated_at": datetime.now(),
            },
        ).returning(Review.id, Review.updated_at)

        row = (await self.db.execute(stmt)).one()
        await self.db.commit()

        # updated_at заповнюється лише гілкою DO UPDATE
        return row.id, row.updated_at is None

    async def submit_review(self, review_data: ReviewCreate, user_id: int) -> Tuple[dict, bool]:
        """Повертає (відгук, created)."""
        book = await self._get_book(review_data.book_id)

        if self.policy == ReviewPolicy.SINGLE:
            await self._claim_legacy_review(book.id, user_id)
            review_id, created = await self._upsert_review(review_data, user_id)
        else:
            if book.added_by == user_id:
                logger.warning(f"User {user_id} tried to review own book {book.id}")
                raise forbidden("You cannot review your own book")

            new_review = Review(
                book_id=book.id,
                user_id=user_id,
                rating=review_data.rating,
                review_text=review_data.review_text,
            )
            self.db.add(new_review)
            await self.db.commit()
            review_id, created = new_review.id, True

        logger.info(
            f"Review {review_id} {'created' if created else 'updated'} "
            f"by user {user_id} for book {review_data.book_id}",
        )
        return serialize_review(await self._get_review(review_id)), created

    async def update_review(
        self,
        review_id: int,
        review_data: ReviewUpdate,
        user_id: int,
    ) -> dict:
        review = await self._get_authored_review(review_id, user_id, "update")

        changes = review_data.model_dump(exclude_unset=True, exclude_none=True)
        if changes:
            for key, value in changes.items():
                setattr(review, key, value)
            review.updated_at = datetime.now()
            await self.db.commit()
            logger.info(f"Review {review_id} updated by user {user_id}")

        return serialize_review(await self._get_review(review_id))

    async def delete_review(self, review_id: int, user_id: int) -> None:
        review = await self._get_authored_review(review_id, user_id, "delete")

        await self.db.delete(review)
        await self.db.commit()

        logger.info(f"Review {review_id} deleted by user {user_id}")

    async def list_book_reviews(self, book_id: int) -> List[dict]:
        await self._get_book(book_id)

        result = await self.db.execute(
            select(Review)
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc(), Review.id.desc()),
        )
        return [serialize_review(review) for review in result.scalars().all()]

    async def list_user_reviews(self, user_id: int) -> List[dict]:
        result = await self.db.execute(
            select(Review)
            .options(joinedload(Review.book))
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc()),
        )
        return [
            serialize_review(review, book=review.book)
            for review in result.scalars().all()
        ]

    async def can_review(self, book_id: int, user_id: int) -> dict:
        book = await self._get_book(book_id)
        existing = await self._find_user_review(book.id, user_id)
        is_owner = book.added_by == user_id

        if self.policy == ReviewPolicy.MULTIPLE and is_owner:
            can_review, reason = False, "You cannot review your own book"
        elif self.policy == ReviewPolicy.SINGLE and existing is not None:
            can_review, reason = True, "Submitting again updates your existing review"
        else:
            can_review, reason = True, None

        return {
            "canReview": can_review,
            "isOwner": is_owner,
            "hasReviewed": existing is not None,
            "existingReviewId": existing.id if existing else None,
            "policy": self.policy.value,
            "reason": reason,
        }
