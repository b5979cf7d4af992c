import pytest
from pydantic import ValidationError

from app.exceptions.book_filters import build_book_query
from app.exceptions.pagination import paginate_response, total_pages
from app.schemas.schemas import MAX_PAGE, MAX_PAGE_SIZE, BookListParams, SortOption


def test_defaults():
    params = BookListParams()

    assert params.page == 1
    assert params.limit == 5
    assert params.sort_by == SortOption.NEWEST


@pytest.mark.parametrize(
    "page, limit",
    [(0, 5), (-1, 5), (MAX_PAGE + 1, 5), (10**19, 5), (1, 0), (1, 51)],
)
def test_out_of_range_params_are_rejected(page, limit):
    with pytest.raises(ValidationError):
        BookListParams(page=page, limit=limit)


def test_unknown_sort_falls_back_to_newest():
    assert BookListParams(sortBy="popularity").sort_by == SortOption.NEWEST
    assert BookListParams(sortBy="title-asc").sort_by == SortOption.TITLE_ASC


def test_blank_filters_are_ignored():
    params = BookListParams(search="  ", genre="")

    assert params.search is None
    assert params.genre is None


@pytest.mark.parametrize("page, limit, offset", [(1, 5, 0), (2, 5, 5), (3, 7, 14), (10, 50, 450)])
def test_offset(page, limit, offset):
    query = build_book_query(BookListParams(page=page, limit=limit))

    assert query.offset == offset
    assert query.limit == limit


def test_last_allowed_page_offset_fits_in_int32():
    query = build_book_query(BookListParams(page=MAX_PAGE, limit=MAX_PAGE_SIZE))

    assert query.offset < 2**31


@pytest.mark.parametrize(
    "sort_by, rating_sort",
    [
        ("newest", None),
        ("year-asc", None),
        ("rating-desc", SortOption.RATING_DESC),
        ("rating-asc", SortOption.RATING_ASC),
    ],
)
def test_rating_sort_is_deferred(sort_by, rating_sort):
    query = build_book_query(BookListParams(sortBy=sort_by))

    assert query.rating_sort == rating_sort


def test_rating_sort_uses_newest_order_in_database():
    rating_query = build_book_query(BookListParams(sortBy="rating-desc"))
    newest_query = build_book_query(BookListParams(sortBy="newest"))

    assert str(rating_query.statement) == str(newest_query.statement)


@pytest.mark.asyncio
async def test_filters_against_database(db, make_user, make_book):
    owner = await make_user()
    other = await make_user()
    dune = await make_book(owner, title="Dune", author="Frank Herbert", genre="Sci-Fi")
    await make_book(owner, title="Foundation", author="Isaac Asimov", genre="Sci-Fi")
    emma = await make_book(other, title="Emma", author="Jane Austen", genre="Classic")
    percent = await make_book(other, title="100% Pure", author="Someone")

    async def ids(params, owner_id=None):
        query = build_book_query(params, owner_id=owner_id)
        return {book.id for book in (await db.execute(query.statement)).scalars()}

    assert await ids(BookListParams(search="dune")) == {dune.id}
    assert await ids(BookListParams(search="AUSTEN")) == {emma.id}
    assert await ids(BookListParams(search="%")) == {percent.id}
    assert await ids(BookListParams(genre="Classic")) == {emma.id}
    assert await ids(BookListParams(genre="classic")) == set()
    assert await ids(BookListParams(), owner_id=other.id) == {emma.id, percent.id}

    query = build_book_query(BookListParams(genre="Sci-Fi", limit=1))
    assert await db.scalar(query.count_statement) == 2


def test_total_pages():
    assert total_pages(0, 5) == 0
    assert total_pages(5, 5) == 1
    assert total_pages(12, 5) == 3


def test_paginate_response():
    response = paginate_response(12, 2, 5, ["a"])

    assert response["pagination"] == {
        "currentPage": 2,
        "totalPages": 3,
        "totalBooks": 12,
        "hasNext": True,
        "hasPrev": True,
    }
