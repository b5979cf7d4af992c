from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.dependencies.database import Base

MIN_RATING = 1
MAX_RATING = 5
REVIEW_TEXT_MAX_LENGTH = 500


def review_dedupe_key(user_id: int, book_id: int) -> str:
    return f"{user_id}:{book_id}"


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint(
            f"rating >= {MIN_RATING} AND rating <= {MAX_RATING}",
            name="ck_reviews_rating_range",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    rating = Column(Integer, nullable=False)
    review_text = Column(String(REVIEW_TEXT_MAX_LENGTH), nullable=False)
    # "{user_id}:{book_id}" while the single-review policy applies, NULL otherwise
    dedupe_key = Column(String(64), unique=True, nullable=True)
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=True)

    book = relationship("Book", back_populates="reviews")
    user = relationship("User", back_populates="reviews", lazy="joined")
