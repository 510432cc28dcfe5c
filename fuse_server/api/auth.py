# fuse_server/api/auth.py
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import SQLAlchemyError

from fuse_server.core.config import SettingsDep
from fuse_server.core.errors import InternalError, NotFoundError, UnauthorizedError
from fuse_server.core.security import decode_access_token
from fuse_server.schemas.read import UserRead
from fuse_server.schemas.write import LoginRequest, TokenResponse, UserPayload
from fuse_server.services.store import StoreDep
from fuse_server.services.user import authenticate, issue_token, register_user

logger = logging.getLogger(__name__)

router = APIRouter()

# Exact request paths admitted without a token
PUBLIC_PATHS = frozenset({"/auth/signup", "/auth/login", "/users/"})

bearer_scheme = HTTPBearer(auto_error=False)


def _resolve_identity(token: str, store, settings) -> UserRead:
    try:
        payload = decode_access_token(token, settings)
    except ExpiredSignatureError:
        logger.info("Rejected expired access token")
        raise UnauthorizedError("Token has expired")
    except JWTError as e:
        logger.warning(f"Rejected access token: {e}")
        raise UnauthorizedError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Access token has no 'sub' claim")
        raise UnauthorizedError("User ID is missing in token claims")

    try:
        return store.get_user(user_id)
    except NotFoundError:
        logger.warning(f"Token subject {user_id} does not exist")
        raise UnauthorizedError("User not found")
    except (SQLAlchemyError, InternalError) as e:
        logger.error(f"Error fetching user {user_id} for token: {e}", exc_info=True)
        raise InternalError("Failed to fetch user") from e


def authorize(
    request: Request,
    store: StoreDep,
    settings: SettingsDep,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Optional[UserRead]:
    """Application-wide gate: admits public paths, otherwise resolves the caller.

    Returns the caller, or ``None`` on a public path. FastAPI caches the result
    per request, so ``get_current_user`` reuses it without a second lookup.
    """
    if request.url.path in PUBLIC_PATHS:
        return None

    if credentials is None:
        if request.headers.get("Authorization"):
            # Present but not of the form "Bearer <token>"
            raise UnauthorizedError("Invalid token")
        raise UnauthorizedError("Authorization header is required")

    return _resolve_identity(credentials.credentials, store, settings)


def get_current_user(user: Annotated[Optional[UserRead], Depends(authorize)]) -> UserRead:
    if user is None:
        raise UnauthorizedError("User not authenticated")
    return user


CurrentUser = Annotated[UserRead, Depends(get_current_user)]


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def signup(payload: UserPayload, store: StoreDep):
    return register_user(store, payload)


@router.post("/login", response_model=TokenResponse)
def login(credentials: LoginRequest, store: StoreDep, settings: SettingsDep):
    user = authenticate(store, credentials.email, credentials.password)
    logger.info(f"User {user.id} logged in.")
    return TokenResponse(token=issue_token(user, settings))
