"""Session login/logout and the current principal."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hsc_api.config import settings
from hsc_api.models.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    PrincipalRead,
    UserRead,
)
from hsc_api.services.auth_service import (
    authenticate_user,
    issue_session,
    revoke_session,
)
from hsc_api.services.authz import Principal, get_current_principal
from hsc_api.services.schema_service import require_db_ready
from hsc_api.utils.db_async import get_session

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    dependencies=[Depends(require_db_ready)],
)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> LoginResponse:
    """Verify credentials and set the session cookie."""
    user = await authenticate_user(db, email=payload.email, password=payload.password)
    if user is None or user.id is None:
        raise HTTPException(status_code=401, detail="invalid_credentials")

    raw_token, _expires_at = await issue_session(
        db,
        user_id=user.id,
        ip=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )

    response.set_cookie(
        key=settings.cookie_name,
        value=raw_token,
        httponly=True,
        samesite=settings.cookie_samesite,
        secure=settings.cookie_secure,
        path="/",
        max_age=settings.session_ttl_minutes * 60,
    )
    return LoginResponse(
        user=UserRead(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
        )
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_session),
) -> dict:
    """Revoke the current session (if any) and clear the cookie."""
    raw_token = request.cookies.get(settings.cookie_name)
    if raw_token:
        await revoke_session(db, raw_token=raw_token)

    response.delete_cookie(
        settings.cookie_name,
        path="/",
        secure=settings.cookie_secure,
        httponly=True,
        samesite=settings.cookie_samesite,
    )
    return {"ok": True}


@router.get("/me", response_model=MeResponse)
async def me(principal: Principal = Depends(get_current_principal)) -> MeResponse:
    return MeResponse(
        principal=PrincipalRead(
            role=principal.role,
            source=principal.source,
            user_id=principal.user_id,
            email=principal.email,
        )
    )
