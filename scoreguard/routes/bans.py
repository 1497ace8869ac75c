from fastapi import APIRouter, Depends, HTTPException, Path
from ..anticheat import AntiCheatService
from ..models.response import BanStatusResponse
from ..logger import get_logger
from .deps import get_service

logger = get_logger()
router = APIRouter()

@router.get("/users/{user_id}/ban", response_model=BanStatusResponse)
async def get_ban_status(
    user_id: str = Path(..., min_length=1, max_length=100),
    service: AntiCheatService = Depends(get_service)
):
    """Whether the user is currently banned; an unreachable store reads as not banned."""
    return BanStatusResponse(user_id=user_id, banned=await service.is_user_banned(user_id))

@router.delete("/users/{user_id}/ban", response_model=BanStatusResponse)
async def lift_ban(
    user_id: str = Path(..., min_length=1, max_length=100),
    service: AntiCheatService = Depends(get_service)
):
    """Lift a ban after review."""
    if service.ban_registry is None:
        raise HTTPException(status_code=503, detail="Ban registry unavailable")
    try:
        removed = await service.ban_registry.unban(user_id)
    except Exception as e:
        logger.error(f"Error lifting ban for {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to lift ban")
    if not removed:
        raise HTTPException(status_code=404, detail="User is not banned")
    logger.info(f"Lifted ban for user {user_id}")
    return BanStatusResponse(user_id=user_id, banned=False)
