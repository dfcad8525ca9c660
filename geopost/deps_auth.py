from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from .deps import get_token_service
from .errors import AuthError
from .utils.security import TokenService

bearer = HTTPBearer(auto_error=False)

async def get_current_username(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    if not creds:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="not_authenticated")
    try:
        claims = tokens.verify(creds.credentials)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.detail)
    return claims["username"]
