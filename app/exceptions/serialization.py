from typing import Optional

from app.models.book import Book
from app.models.review import Review
from app.models.user import User
from app.services.ratings import RatingStats


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
    }


def serialize_book(book: Book, stats: Optional[RatingStats] = None) -> dict:
    data = {
        "id": book.id,
        "title": book.title,
        "author": book.author,
        "description": book.description,
        "genre": book.genre,
        "publishedYear": book.published_year,
        "addedBy": serialize_user(book.owner),
        "createdAt": book.created_at,
        "updatedAt": book.updated_at,
    }
    if stats is not None:
        data["averageRating"] = stats.average_rating
        data["reviewCount"] = stats.review_count
    return data


def serialize_review(review: Review, book: Optional[Book] = None) -> dict:
    data = {
        "id": review.id,
        "bookId": review.book_id,
        "user": {"id": review.user.id, "name": review.user.name},
        "rating": review.rating,
        "reviewText": review.review_text,
        "createdAt": review.created_at,
        "updatedAt": review.updated_at,
    }
    if book is not None:
        data["book"] = {"id": book.id, "title": book.title, "author": book.author}
    return data
