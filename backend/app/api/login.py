"""Login endpoint for LeadDesk counselors and superadmins."""

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.core.identity import Identity, IdentityProvider
from backend.app.core.security import create_access_token
from backend.app.dependencies.auth import get_current_user, get_identity_provider
from backend.app.schemas.login import LoginRequest, TokenResponse
from backend.app.schemas.user import UserRead
from backend.app.services.access_policy import can_assign, can_view_assignee

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, provider: IdentityProvider = Depends(get_identity_provider)):
    user = provider.authenticate(credentials.username, credentials.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    token = create_access_token(user.username, user.role.value)
    return TokenResponse(access_token=token, username=user.username, role=user.role.value)


@router.get("/me", response_model=UserRead)
def read_me(current_user: Identity = Depends(get_current_user)):
    return UserRead(
        username=current_user.username,
        role=current_user.role.value,
        can_assign=can_assign(current_user),
        can_view_assignee=can_view_assignee(current_user),
    )
