"""
Auth Controller
===============

Registration, login, token refresh, password change and the CSRF cookie.
"""
from fastapi import APIRouter, Depends, Request, Response, status

from servicedesk.api.rate_limit import AUTH_RATE_LIMIT, limiter
from servicedesk.api.responses import success
from servicedesk.api.v1.dependencies import get_auth_service, get_current_user
from servicedesk.application.dto.auth_dto import (
    ChangePasswordRequest,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from servicedesk.application.services.auth_service import AuthService
from servicedesk.core.config import get_settings
from servicedesk.core.security import generate_csrf_token
from servicedesk.domain.models.user import User

router = APIRouter(tags=["auth"])


def _token_response(result: dict) -> TokenResponse:
    return TokenResponse(
        access_token=result["access_token"],
        refresh_token=result["refresh_token"],
        token_type=result["token_type"],
        user=UserResponse.from_entity(result["user"]) if result.get("user") else None,
    )


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
    description="""
    Create an account and sign it in.

    With `organization_name` a new organization is created and the user
    becomes its admin. Without it the account waits for an organization
    admin to add it.
    """
)
@limiter.limit(AUTH_RATE_LIMIT)
def register(
    request: Request,
    body: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    result = service.register(
        email=body.email,
        name=body.name,
        password=body.password,
        organization_name=body.organization_name,
        department=body.department,
    )
    return success(_token_response(result), "Registration successful")


@router.post("/login", summary="Sign in with email and password")
@limiter.limit(AUTH_RATE_LIMIT)
def login(
    request: Request,
    body: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    return success(_token_response(service.login(body.email, body.password)))


@router.post("/refresh", summary="Exchange a refresh token for a new token pair")
def refresh(
    body: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
):
    return success(_token_response(service.refresh(body.refresh_token)))


@router.get("/me", summary="Current user")
def me(user: User = Depends(get_current_user)):
    return success(UserResponse.from_entity(user))


@router.post("/change-password", summary="Change the current user's password")
def change_password(
    body: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    service.change_password(user, body.current_password, body.new_password)
    return success(message="Password changed successfully")


@router.get(
    "/csrf-token",
    summary="Issue a CSRF token",
    description="Returns a token and sets it as the CSRF cookie; send it back in the CSRF header on mutating requests.",
)
def csrf_token(response: Response):
    settings = get_settings()
    token = generate_csrf_token()
    response.set_cookie(
        key=settings.csrf_cookie_name,
        value=token,
        httponly=False,
        samesite="lax",
        secure=settings.environment == "production",
    )
    return success({"csrf_token": token})


@router.post("/logout", summary="Sign out")
def logout(response: Response, user: User = Depends(get_current_user)):
    """Tokens are stateless; the client discards them. The CSRF cookie is cleared."""
    response.delete_cookie(get_settings().csrf_cookie_name)
    return success(message="Logged out successfully")
