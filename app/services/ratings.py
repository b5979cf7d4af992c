"""
Агрегація рейтингів книг.

Середній рейтинг не зберігається в БД: для кожної сторінки він
рахується заново з відгуків одним згрупованим запитом.
"""

from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.book import Book
from app.models.review import Review


class RatingStats(NamedTuple):
    average_rating: float
    review_count: int


EMPTY_STATS = RatingStats(average_rating=0, review_count=0)


def round_rating(total: int, count: int) -> float:
    """Середнє total/count, округлене half-up до одного знаку після коми."""
    if count <= 0:
        return 0
    # floor(total / count * 10 + 0.5) в цілих числах, без похибок float
    return ((20 * total + count) // (2 * count)) / 10


def rating_stats(ratings: Iterable[int]) -> RatingStats:
    ratings = list(ratings)
    return RatingStats(round_rating(sum(ratings), len(ratings)), len(ratings))


async def fetch_rating_stats(
    db: AsyncSession,
    book_ids: Sequence[int],
) -> Dict[int, RatingStats]:
    if not book_ids:
        return {}

    result = await db.execute(
        select(
            Review.book_id,
            func.coalesce(func.sum(Review.rating), 0),
            func.count(Review.id),
        )
        .where(Review.book_id.in_(book_ids))
        .group_by(Review.book_id),
    )
    return {
        book_id: RatingStats(round_rating(int(total), count), count)
        for book_id, total, count in result.all()
    }


async def attach_ratings(
    db: AsyncSession,
    books: Sequence[Book],
) -> List[Tuple[Book, RatingStats]]:
    stats = await fetch_rating_stats(db, [book.id for book in books])
    return [(book, stats.get(book.id, EMPTY_STATS)) for book in books]


def sort_by_rating(
    books_with_stats: List[Tuple[Book, RatingStats]],
    descending: bool = True,
) -> List[Tuple[Book, RatingStats]]:
    """Сортує лише поточну сторінку, а не всю вибірку."""
    return sorted(
        books_with_stats,
        key=lambda item: item[1].average_rating,
        reverse=descending,
    )
