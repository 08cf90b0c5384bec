# storefront/api/deps.py
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.domain.errors import AuthenticationFailed
from storefront.services.token_service import AuthContext, RevocationStore, TokenService

_bearer = HTTPBearer(auto_error=False)


def get_token_service(request: Request) -> TokenService:
    return TokenService(RevocationStore(request.app.state.redis))


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(get_token_service),
) -> AuthContext:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        return tokens.verify(credentials.credentials)
    except AuthenticationFailed as e:
        raise HTTPException(status_code=401, detail=str(e))
