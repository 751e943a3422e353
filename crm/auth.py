"""Authentication: password hashing, bearer tokens, the auth gate, and routes."""

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from fastapi import APIRouter, Depends, Header, Request, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import schemas, crud
from .core import get_settings
from .database import get_db
from .errors import InvalidCredentials, InvalidToken, Unauthenticated

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


class PasswordHasher:
    """One-way salted bcrypt hashing with a configurable work factor."""

    def __init__(self, rounds: int = 10):
        self.context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        """Generate a password hash."""
        return self.context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Compare a plain password with its hashed value."""
        try:
            return self.context.verify(password, password_hash)
        except (ValueError, TypeError):
            return False


class TokenService:
    """
    Issues and verifies signed, time-bounded bearer tokens.

    The signing secret is supplied at construction; the token carries the
    user id in ``sub`` and an absolute expiry in ``exp``.
    """

    def __init__(
        self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, expires_delta: timedelta | None = None) -> str:
        """Create a signed JWT for ``user_id``."""
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(minutes=self.expire_minutes)
        )
        to_encode = {"sub": str(user_id), "exp": expire}
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """
        Decode a token and return the user id it was issued for.

        Raises:
            InvalidToken: If the token is malformed, expired, signed with
                another key or carries no usable subject.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True, "require_sub": True},
            )
            token_data = schemas.TokenData(**payload)
            return int(token_data.sub)
        except (JWTError, ValidationError, TypeError, ValueError):
            raise InvalidToken()


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    """Return the process-wide password hasher built from settings."""
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


@lru_cache()
def get_token_service() -> TokenService:
    """Return the process-wide token service built from settings."""
    settings = get_settings()
    return TokenService(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )


def get_current_user_id(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> int:
    """
    Dependency guarding every contact and dashboard route.

    Reads ``Authorization: Bearer <token>``, verifies the token and stores
    the user id on ``request.state``.

    Raises:
        Unauthenticated: If no token was provided.
        InvalidToken: If the token does not verify.
    """
    token = (authorization or "").strip()
    scheme, _, credentials = token.partition(" ")
    if scheme.lower() == "bearer":
        token = credentials.strip()
    if not token:
        raise Unauthenticated()

    user_id = tokens.verify(token)
    request.state.user_id = user_id
    return user_id


@router.post(
    "/register", response_model=schemas.Message, status_code=status.HTTP_201_CREATED
)
def register(
    user_in: schemas.UserCreate,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new user. No token is issued; the client logs in next."""

    user = crud.create_user(
        db,
        username=user_in.username,
        email=user_in.email,
        password_hash=hasher.hash(user_in.password),
    )
    logger.info("Registered user %s (%s)", user.username, user.id)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=schemas.LoginResponse)
def login(
    credentials: schemas.LoginRequest,
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
):
    """Authenticate by email and password and return a bearer token."""

    user = crud.get_user_by_email(db, credentials.email)
    if not user or not hasher.verify(credentials.password, user.password_hash):
        logger.info("Failed login attempt")
        raise InvalidCredentials()
    logger.info("Login: %s (%s)", user.username, user.id)
    return schemas.LoginResponse(token=tokens.issue(user.id), username=user.username)
