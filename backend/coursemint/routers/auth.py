"""Auth routes: register, login, logout."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from coursemint.core.auth import (
    SESSION_TOKEN_HEADER,
    get_current_user,
    login_user,
    logout_user,
    register_user,
)
from coursemint.dependencies import get_db
from coursemint.models.user import User
from coursemint.schemas.user import UserCreate, UserLogin, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
async def register(
    body: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    ip = request.client.host if request.client else None
    return await register_user(
        db,
        email=body.email,
        password=body.password,
        full_name=body.full_name,
        ip_address=ip,
    )


@router.post("/login")
async def login(
    body: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    ip = request.client.host if request.client else None
    user, token = await login_user(db, email=body.email, password=body.password, ip_address=ip)
    return {"token": token, "user_id": str(user.id)}


@router.post("/logout", status_code=204)
async def logout(
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ip = request.client.host if request.client else None
    await logout_user(db, token=request.headers[SESSION_TOKEN_HEADER], ip_address=ip)
