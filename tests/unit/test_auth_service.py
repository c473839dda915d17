"""
Модульные тесты для AuthService.

Покрываемые методы:
- hash_password / verify_password
- create_access_token
- authenticate_user
- register_user
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import AsyncMock
from jose import jwt
from fastapi import HTTPException

from app.services.auth_service import auth_service
from app.core.config import settings
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserLogin, UserRegister

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# hash_password / verify_password
# ---------------------------------------------------------------------------

def test_hash_password_creates_valid_bcrypt_hash():
    """hash_password должен возвращать непустую строку, начинающуюся с $2b$."""
    hashed = auth_service.hash_password("secret")
    assert isinstance(hashed, str)
    assert hashed.startswith("$2b$")


def test_hash_password_produces_unique_salts():
    h1 = auth_service.hash_password("same_password")
    h2 = auth_service.hash_password("same_password")
    assert h1 != h2


def test_verify_password_valid_credentials():
    plain = "my_password"
    hashed = auth_service.hash_password(plain)
    assert auth_service.verify_password(plain, hashed) is True


def test_verify_password_wrong_password_returns_false():
    hashed = auth_service.hash_password("correct_password")
    assert auth_service.verify_password("wrong_password", hashed) is False


def test_verify_password_empty_hash_returns_false():
    """verify_password возвращает False, если хэш пустой или None."""
    assert auth_service.verify_password("password", "") is False
    assert auth_service.verify_password("password", None) is False


def test_verify_password_malformed_hash_returns_false():
    assert auth_service.verify_password("password", "not-a-bcrypt-hash") is False


# ---------------------------------------------------------------------------
# create_access_token
# ---------------------------------------------------------------------------

def test_create_access_token_contains_sub():
    token = auth_service.create_access_token(data={"sub": "42"})
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == "42"


def test_create_access_token_expires_within_expected_delta():
    """Access-токен должен истекать не позже чем через ACCESS_TOKEN_EXPIRE_MINUTES + 1 мин."""
    token = auth_service.create_access_token(data={"sub": "1"})
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    exp = datetime.utcfromtimestamp(payload["exp"])
    max_exp = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES + 1)
    assert exp <= max_exp


def test_create_access_token_custom_expiry():
    token = auth_service.create_access_token(data={"sub": "1"}, expires_delta=timedelta(seconds=10))
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    exp = datetime.utcfromtimestamp(payload["exp"])
    assert exp < datetime.utcnow() + timedelta(seconds=20)


# ---------------------------------------------------------------------------
# authenticate_user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_authenticate_user_success():
    plain_password = "pass123"
    user = User(id=1, email="u@test.com", nickname="u", password=auth_service.hash_password(plain_password))
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_email.return_value = user

    result = await auth_service.authenticate_user(
        repo, UserLogin(email="u@test.com", password=plain_password)
    )
    assert result == user


@pytest.mark.asyncio
async def test_authenticate_user_user_not_found_returns_none():
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_email.return_value = None

    result = await auth_service.authenticate_user(
        repo, UserLogin(email="unknown@test.com", password="any")
    )
    assert result is None


@pytest.mark.asyncio
async def test_authenticate_user_wrong_password_returns_none():
    user = User(id=1, email="u@test.com", nickname="u", password=auth_service.hash_password("correct"))
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_email.return_value = user

    result = await auth_service.authenticate_user(
        repo, UserLogin(email="u@test.com", password="wrong")
    )
    assert result is None


# ---------------------------------------------------------------------------
# register_user
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_register_user_existing_email_raises_400():
    existing = User(id=1, email="exists@test.com", nickname="x", password="hashed")
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_email.return_value = existing

    with pytest.raises(HTTPException) as exc_info:
        await auth_service.register_user(
            repo, UserRegister(nickname="new", email="exists@test.com", password="pass123")
        )
    assert exc_info.value.status_code == 400
    repo.create_user.assert_not_called()


@pytest.mark.asyncio
async def test_register_user_creates_new_user_with_hashed_password():
    """register_user сохраняет хэш пароля, а не сам пароль."""
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_email.return_value = None
    repo.create_user.side_effect = lambda user: user

    result = await auth_service.register_user(
        repo, UserRegister(nickname="newbie", email="new@test.com", password="password123", weight=72.5)
    )

    assert result.email == "new@test.com"
    assert result.weight == 72.5
    assert result.password != "password123"
    assert auth_service.verify_password("password123", result.password) is True
