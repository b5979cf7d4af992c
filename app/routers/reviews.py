from fastapi import APIRouter, Depends, Response, status

from app.dependencies.services import get_review_service
from app.schemas.schemas import ReviewCreate, ReviewUpdate
from app.services.reviews_service import ReviewService
from app.services.user_service import get_current_user_id

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def submit_review(
    review_data: ReviewCreate,
    response: Response,
    reviews: ReviewService = Depends(get_review_service),
    user_id: int = Depends(get_current_user_id),
):
    """Додати відгук (або оновити існуючий, залежно від політики)"""
    review, created = await reviews.submit_review(review_data, user_id)
    if not created:
        response.status_code = status.HTTP_200_OK

    return {
        "success": True,
        "message": "Review created successfully" if created else "Review updated successfully",
        "data": review,
    }


@router.put("/{review_id}", response_model=dict)
async def update_review(
    review_id: int,
    review_data: ReviewUpdate,
    reviews: ReviewService = Depends(get_review_service),
    user_id: int = Depends(get_current_user_id),
):
    return {
        "success": True,
        "message": "Review updated successfully",
        "data": await reviews.update_review(review_id, review_data, user_id),
    }


@router.delete("/{review_id}", response_model=dict)
async def delete_review(
    review_id: int,
    reviews: ReviewService = Depends(get_review_service),
    user_id: int = Depends(get_current_user_id),
):
    await reviews.delete_review(review_id, user_id)
    return {"success": True, "message": "Review deleted successfully"}


@router.get("/book/{book_id}", response_model=dict)
async def list_book_reviews(
    book_id: int,
    reviews: ReviewService = Depends(get_review_service),
):
    return {"success": True, "data": await reviews.list_book_reviews(book_id)}


@router.get("/user/{user_id}", response_model=dict)
async def list_user_reviews(
    user_id: int,
    reviews: ReviewService = Depends(get_review_service),
):
    return {"success": True, "data": await reviews.list_user_reviews(user_id)}


@router.get("/can-review/{book_id}", response_model=dict)
async def can_review(
    book_id: int,
    reviews: ReviewService = Depends(get_review_service),
    user_id: int = Depends(get_current_user_id),
):
    return {"success": True, "data": await reviews.can_review(book_id, user_id)}
