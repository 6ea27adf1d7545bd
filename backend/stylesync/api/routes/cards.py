"""Card endpoints - the caller's rank/suit card and their friends' cards."""

from fastapi import APIRouter, Depends

from stylesync.api.deps import get_card_service, get_current_public_id
from stylesync.schemas.card import CardProfileOut, FriendCardsResponse
from stylesync.services.card_profile_service import CardProfileService

router = APIRouter()


@router.get("/me", response_model=CardProfileOut)
async def get_card_profile(
    public_id: str = Depends(get_current_public_id),
    service: CardProfileService = Depends(get_card_service),
):
    """Get (or compute) the caller's card profile with rank progression."""
    return await service.get_card_profile(public_id)


@router.get("/friends", response_model=FriendCardsResponse)
async def get_friends_cards(
    public_id: str = Depends(get_current_public_id),
    service: CardProfileService = Depends(get_card_service),
):
    """Cards for everyone the caller has an accepted relationship with."""
    return FriendCardsResponse(cards=await service.list_friend_cards(public_id))
