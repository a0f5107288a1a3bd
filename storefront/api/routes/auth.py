from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from storefront.config import settings
from storefront.core.exceptions import UnauthorizedError
from storefront.core.security import (
    Identity,
    create_access_token,
    get_current_identity,
    verify_password,
)
from storefront.schemas.auth import IdentityOut, LoginRequest, LoginResponse

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, response: Response) -> LoginResponse:
    email = payload.email.strip().lower()
    if email != settings.admin_email.lower():
        raise UnauthorizedError("Invalid credentials")

    if not verify_password(
        payload.password, settings.admin_password_hash.get_secret_value()
    ):
        raise UnauthorizedError("Invalid credentials")

    identity = Identity(id="admin", role="admin", email=settings.admin_email)
    token = create_access_token(identity)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.token_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.app_env == "production",
    )
    return LoginResponse(
        access_token=token,
        user=IdentityOut(id=identity.id, role=identity.role, email=identity.email),
    )


@router.post("/logout")
async def logout(response: Response) -> dict:
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}


@router.get("/me", response_model=IdentityOut)
async def me(identity: Identity = Depends(get_current_identity)) -> IdentityOut:
    return IdentityOut(id=identity.id, role=identity.role, email=identity.email)
