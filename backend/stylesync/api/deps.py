"""Shared FastAPI dependencies: caller identity and service wiring."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from stylesync.config import settings
from stylesync.db.database import get_db
from stylesync.services.card_cache import CardProfileCache, build_card_cache
from stylesync.services.card_profile_service import CardProfileService
from stylesync.services.profile_store import ProfileStore
from stylesync.services.relationship_service import RelationshipService
from stylesync.services.relationship_store import RelationshipStore

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_public_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Verify the bearer token and return the caller's public id.

    The id is trusted as-is from here on.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = jwt.decode(
            credentials.credentials, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise credentials_exception

    public_id = payload.get("publicId")
    if not isinstance(public_id, str) or not public_id:
        raise credentials_exception
    return public_id


def get_card_cache(request: Request) -> CardProfileCache:
    """The app-wide cache built at startup."""
    cache = getattr(request.app.state, "card_cache", None)
    if cache is None:
        cache = request.app.state.card_cache = build_card_cache(settings)
    return cache


def get_card_service(
    db: AsyncSession = Depends(get_db),
    cache: CardProfileCache = Depends(get_card_cache),
) -> CardProfileService:
    return CardProfileService(RelationshipStore(db), ProfileStore(db), cache)


def get_relationship_service(
    db: AsyncSession = Depends(get_db),
    cards: CardProfileService = Depends(get_card_service),
) -> RelationshipService:
    return RelationshipService(db, cards)
