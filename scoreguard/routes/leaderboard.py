from fastapi import APIRouter, Depends, HTTPException, Query, Path
from ..models.response import LeaderboardResponse, LeaderboardEntry
from ..logger import get_logger
from .deps import get_score_store

logger = get_logger()
router = APIRouter()

@router.get("/games/{game_id}/leaders", response_model=LeaderboardResponse)
async def get_leaders(
    game_id: str = Path(..., min_length=1, max_length=100),
    limit: int = Query(10, ge=1, le=100),
    score_store=Depends(get_score_store)
):
    """
    Get the top verified scores for a specific game.

    - **game_id**: Unique identifier for the game
    - **limit**: Number of leaders to return (1-100)
    """
    if score_store is None:
        raise HTTPException(status_code=503, detail="Leaderboard unavailable")
    try:
        leaders = await score_store.get_top_k(game_id, limit)
        entries = [
            LeaderboardEntry(user_id=leader.user_id, score=leader.score, rank=idx + 1)
            for idx, leader in enumerate(leaders)
        ]
        return LeaderboardResponse(game_id=game_id, entries=entries)
    except Exception as e:
        logger.error(f"Error getting leaders: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to get leaderboard")
