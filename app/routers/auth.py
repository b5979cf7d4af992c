from fastapi import APIRouter, Depends, status

from app.dependencies.services import get_auth_service
from app.schemas.schemas import LoginRequest, RegisterRequest
from app.services.user_service import AuthService, get_current_user_id

router = APIRouter(prefix="/auth", tags=["Auth"])


# Реєстрація користувача
@router.post("/register", response_model=dict, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    return {
        "success": True,
        "message": "User registered successfully",
        **await auth.register(user_data),
    }


# 🔑 Логін користувача (отримання JWT-токена)
@router.post("/login", response_model=dict, status_code=status.HTTP_200_OK)
async def login(
    login_data: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    return {
        "success": True,
        "message": "Login successful",
        **await auth.login(login_data),
    }


@router.get("/me", response_model=dict)
async def me(
    auth: AuthService = Depends(get_auth_service),
    user_id: int = Depends(get_current_user_id),
):
    return {"success": True, "user": await auth.get_user(user_id)}
