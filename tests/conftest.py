import itertools
import os
from datetime import datetime, timedelta

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import ReviewPolicy, config
from app.dependencies.database import Base, get_db
from app.main import app
from app.models.book import Book
from app.models.review import Review, review_dedupe_key
from app.models.user import User
from app.utils import create_access_token

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def review_policy(monkeypatch):
    def set_policy(policy: ReviewPolicy):
        monkeypatch.setattr(config, "REVIEW_POLICY", policy)

    set_policy(ReviewPolicy.SINGLE)
    return set_policy


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    async def _make_user(name=None):
        n = next(counter)
        user = User(
            name=name or f"Reader {n}",
            email=f"reader{n}@example.com",
            hashed_password="not-a-real-hash",
        )
        db.add(user)
        await db.commit()
        return user

    return _make_user


@pytest.fixture
def make_book(db):
    counter = itertools.count(1)

    async def _make_book(owner: User, **fields):
        n = next(counter)
        data = {
            "title": f"Book {n}",
            "author": f"Author {n}",
            "description": "A book worth reading.",
            "genre": "Fiction",
            "published_year": 2000,
            "created_at": BASE_TIME + timedelta(minutes=n),
        }
        data.update(fields)
        book = Book(added_by=owner.id, **data)
        db.add(book)
        await db.commit()
        return book

    return _make_book


@pytest.fixture
def make_review(db):
    counter = itertools.count(1)

    async def _make_review(book: Book, user: User, rating: int, unique=True):
        n = next(counter)
        review = Review(
            book_id=book.id,
            user_id=user.id,
            rating=rating,
            review_text=f"Review {n}",
            dedupe_key=review_dedupe_key(user.id, book.id) if unique else None,
            created_at=BASE_TIME + timedelta(minutes=n),
        )
        db.add(review)
        await db.commit()
        return review

    return _make_review
