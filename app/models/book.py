from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.dependencies.database import Base

TITLE_MAX_LENGTH = 200
AUTHOR_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
GENRE_MAX_LENGTH = 50
MIN_PUBLISHED_YEAR = 1000


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False, index=True)
    author = Column(String(AUTHOR_MAX_LENGTH), nullable=False, index=True)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=False)
    genre = Column(String(GENRE_MAX_LENGTH), nullable=False, index=True)
    published_year = Column(Integer, nullable=False, index=True)
    added_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    owner = relationship("User", back_populates="books", lazy="joined")
    reviews = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
