from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from app.dependencies.services import get_book_service
from app.schemas.schemas import BookCreate, BookListParams, BookUpdate
from app.services.books_service import BookService
from app.services.user_service import get_current_user_id

router = APIRouter(prefix="/books", tags=["Books"])


@router.get("", response_model=dict, status_code=status.HTTP_200_OK)
async def list_books(
    params: Annotated[BookListParams, Query()],
    books: BookService = Depends(get_book_service),
):
    """📚 Список книг з пошуком, фільтром за жанром, сортуванням і пагінацією"""
    return await books.list_books(params)


@router.get("/genres", response_model=dict)
async def list_genres(books: BookService = Depends(get_book_service)):
    return {"success": True, "data": await books.list_genres()}


@router.get("/my-books", response_model=dict)
async def list_my_books(
    params: Annotated[BookListParams, Query()],
    books: BookService = Depends(get_book_service),
    user_id: int = Depends(get_current_user_id),
):
    return await books.list_books(params, owner_id=user_id)


@router.get("/{book_id}", response_model=dict)
async def get_book(
    book_id: int,
    books: BookService = Depends(get_book_service),
    _: int = Depends(get_current_user_id),
):
    """Книга з середнім рейтингом і всіма відгуками"""
    return {"success": True, "data": await books.get_book_details(book_id)}


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_book(
    book_data: BookCreate,
    books: BookService = Depends(get_book_service),
    user_id: int = Depends(get_current_user_id),
):
    return {
        "success": True,
        "message": "Book created successfully",
        "data": await books.create_book(book_data, user_id),
    }


@router.put("/{book_id}", response_model=dict)
async def update_book(
    book_id: int,
    book_data: BookUpdate,
    books: BookService = Depends(get_book_service),
    user_id: int = Depends(get_current_user_id),
):
    """✏️ Оновлення книги (тільки власник)."""
    return {
        "success": True,
        "message": "Book updated successfully",
        "data": await books.update_book(book_id, book_data, user_id),
    }


@router.delete("/{book_id}", response_model=dict)
async def delete_book(
    book_id: int,
    books: BookService = Depends(get_book_service),
    user_id: int = Depends(get_current_user_id),
):
    """🗑 Видалення книги разом з відгуками (тільки власник)."""
    await books.delete_book(book_id, user_id)
    return {"success": True, "message": "Book deleted successfully"}
