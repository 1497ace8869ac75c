from fastapi import APIRouter, Depends, HTTPException, Path
from ..anticheat import AntiCheatService
from ..models.score import ActionRequest, ProgressRequest, StartSessionRequest
from ..models.response import RecordResponse, SessionResponse
from ..logger import get_logger
from .deps import get_service

logger = get_logger()
router = APIRouter()

@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(data: StartSessionRequest, service: AntiCheatService = Depends(get_service)):
    """
    Open a tracked play session when a game begins.

    - **user_id**: Unique identifier for the user
    - **game_id**: Unique identifier for the game
    """
    try:
        session_id = service.start_session(data.user_id, data.game_id)
        return SessionResponse(session_id=session_id)
    except Exception as e:
        logger.error(f"Error starting session: {e}")
        raise HTTPException(status_code=500, detail="Failed to start session")

@router.post("/sessions/{session_id}/actions", response_model=RecordResponse)
async def record_action(
    data: ActionRequest,
    session_id: str = Path(..., min_length=1, max_length=300),
    service: AntiCheatService = Depends(get_service)
):
    """Best-effort telemetry: ``recorded`` is false for an unknown session."""
    return RecordResponse(recorded=service.record_action(session_id, data.type, data.data))

@router.post("/sessions/{session_id}/progress", response_model=RecordResponse)
async def record_progress(
    data: ProgressRequest,
    session_id: str = Path(..., min_length=1, max_length=300),
    service: AntiCheatService = Depends(get_service)
):
    """Record an intermediate score reached during play."""
    return RecordResponse(recorded=service.record_progress(session_id, data.score))
