from fastapi import APIRouter, Depends, HTTPException
from ..anticheat import AntiCheatService
from ..models.score import ScoreSubmission
from ..logger import get_logger
from .deps import get_rate_limiter, get_service

logger = get_logger()
router = APIRouter()

@router.post("/scores")
async def submit_score(
    data: ScoreSubmission,
    service: AntiCheatService = Depends(get_service),
    rate_limiter=Depends(get_rate_limiter)
):
    """
    Validate a final score and store it when it is plausible.

    - **user_id**: Unique identifier for the user
    - **game_id**: Unique identifier for the game
    - **score**: Non-negative final score
    - **session_id**: Session returned by ``POST /sessions``
    - **duration**: Reported play time in milliseconds
    - **checksum**: Session-bound digest of the score

    Answers 200 with the verdict whether or not the score was accepted.
    """
    try:
        if rate_limiter is not None and isinstance(data.user_id, str) and data.user_id:
            status = await rate_limiter.check(data.user_id, 'score')
            if not status.allowed:
                logger.warning(f"Rate limit exceeded for user {data.user_id}")
                raise HTTPException(
                    status_code=429,
                    detail="Too many score submissions",
                    headers={"X-RateLimit-Reset": str(int(status.reset_time))}
                )

        result = await service.submit_score(data)
        return result.to_wire(expose_details=service.config.expose_details)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error submitting score: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
