"""Authentication dependencies for retrieving the current identity."""

from fastapi import Depends, Header, HTTPException, Request, status

from backend.app.core.dev_seed import default_credentials
from backend.app.core.identity import Identity, IdentityProvider
from backend.app.core.security import decode_access_token
from backend.app.services.access_policy import can_assign


def get_identity_provider(request: Request) -> IdentityProvider:
    provider = getattr(request.app.state, "identity_provider", None)
    if provider is None:
        provider = IdentityProvider(default_credentials())
        request.app.state.identity_provider = provider
    return provider


def get_current_user(
    provider: IdentityProvider = Depends(get_identity_provider),
    authorization: str | None = Header(default=None),
) -> Identity:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        # Decode and validate JWT to retrieve subject
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    username = payload.get("sub")
    user = provider.lookup(username) if isinstance(username, str) else None
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_current_superadmin(current_user: Identity = Depends(get_current_user)) -> Identity:
    if not can_assign(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Superadmin access required")
    return current_user
