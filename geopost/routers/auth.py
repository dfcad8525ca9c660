from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from ..deps import get_credential_store, get_token_service
from ..errors import AlreadyExists, InvalidCredentialsFormat, StoreUnavailable, WrongCredentials
from ..models.user import LoginRequest, SignupRequest, User
from ..services.auth_service import CredentialStore, validate_credentials
from ..utils.security import TokenService

router = APIRouter()

@router.post("/login", response_class=PlainTextResponse)
async def login(body: LoginRequest,
                store: CredentialStore = Depends(get_credential_store),
                tokens: TokenService = Depends(get_token_service)):
    try:
        await store.verify(body.username, body.password)
    except WrongCredentials as e:
        raise HTTPException(401, e.detail)
    except StoreUnavailable as e:
        raise HTTPException(500, e.detail)
    return tokens.issue(body.username)

@router.post("/signup", response_class=PlainTextResponse)
async def signup(body: SignupRequest, store: CredentialStore = Depends(get_credential_store)):
    try:
        validate_credentials(body.username, body.password)
        await store.create(User(**body.model_dump()))
    except (InvalidCredentialsFormat, AlreadyExists) as e:
        raise HTTPException(400, e.detail)
    except StoreUnavailable as e:
        raise HTTPException(500, e.detail)
    return "User added successfully."
