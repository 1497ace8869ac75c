import time
from fastapi import APIRouter
from ..models.response import HealthResponse

router = APIRouter()

# Track application start time
start_time = time.time()

@router.get("/health", response_model=HealthResponse)
@router.head("/health")
async def health_check():
    """Health check endpoint"""
    return HealthResponse(uptime=time.time() - start_time)
