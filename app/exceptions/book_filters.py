from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.sql import Select

from app.models.book import Book
from app.schemas.schemas import BookListParams, SortOption

NEWEST_FIRST = (Book.created_at.desc(), Book.id.desc())

SORT_ORDERS = {
    SortOption.NEWEST: NEWEST_FIRST,
    SortOption.OLDEST: (Book.created_at.asc(), Book.id.asc()),
    SortOption.YEAR_DESC: (Book.published_year.desc(), Book.id.desc()),
    SortOption.YEAR_ASC: (Book.published_year.asc(), Book.id.asc()),
    SortOption.TITLE_ASC: (Book.title.asc(), Book.id.asc()),
    SortOption.TITLE_DESC: (Book.title.desc(), Book.id.desc()),
    # рейтинг рахується після вибірки, тому в БД сортуємо як newest
    SortOption.RATING_DESC: NEWEST_FIRST,
    SortOption.RATING_ASC: NEWEST_FIRST,
}

RATING_SORTS = {SortOption.RATING_DESC, SortOption.RATING_ASC}


def apply_book_filters(
    query: Select,
    search: Optional[str] = None,
    genre: Optional[str] = None,
    owner_id: Optional[int] = None,
) -> Select:
    if owner_id is not None:
        query = query.where(Book.added_by == owner_id)
    if search:
        query = query.where(
            or_(
                Book.title.icontains(search, autoescape=True),
                Book.author.icontains(search, autoescape=True),
            ),
        )
    if genre:
        query = query.where(Book.genre == genre)
    return query


@dataclass(frozen=True)
class BookQuery:
    """Готовий до виконання запит списку книг."""

    statement: Select
    count_statement: Select
    page: int
    limit: int
    offset: int
    # None, або rating-desc / rating-asc: пересортувати сторінку після агрегації
    rating_sort: Optional[SortOption] = None


def build_book_query(
    params: BookListParams,
    owner_id: Optional[int] = None,
) -> BookQuery:
    base_stmt = apply_book_filters(
        select(Book),
        search=params.search,
        genre=params.genre,
        owner_id=owner_id,
    )
    offset = (params.page - 1) * params.limit

    statement = (
        base_stmt.order_by(*SORT_ORDERS[params.sort_by])
        .offset(offset)
        .limit(params.limit)
    )
    count_statement = select(func.count()).select_from(base_stmt.subquery())

    return BookQuery(
        statement=statement,
        count_statement=count_statement,
        page=params.page,
        limit=params.limit,
        offset=offset,
        rating_sort=params.sort_by if params.sort_by in RATING_SORTS else None,
    )
