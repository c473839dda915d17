from fastapi import APIRouter, Depends, HTTPException, status
from datetime import timedelta

from app.core.dependencies import get_user_repository
from app.repositories.user_repository import UserRepository
from app.services.auth_service import auth_service
from app.schemas.auth import UserLogin, UserRegister, AuthResponse

router = APIRouter(tags=["auth"])


def _issue_token(user_id: int) -> AuthResponse:
    access_token = auth_service.create_access_token(
        data={"sub": str(user_id)},
        expires_delta=timedelta(minutes=auth_service.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return AuthResponse(access_token=access_token, token_type="bearer")


@router.post("/login", response_model=AuthResponse)
async def login(user: UserLogin, repo: UserRepository = Depends(get_user_repository)):
    """Аутентификация пользователя и выдача JWT токена"""
    authenticated_user = await auth_service.authenticate_user(repo, user)
    if not authenticated_user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный email или пароль",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return _issue_token(authenticated_user.id)


@router.post("/register", response_model=AuthResponse)
async def register(user: UserRegister, repo: UserRepository = Depends(get_user_repository)):
    """Регистрация нового пользователя и выдача JWT токена"""
    new_user = await auth_service.register_user(repo, user)
    return _issue_token(new_user.id)
