from fastapi import HTTPException, Request
from ..anticheat import AntiCheatService

def get_service(request: Request) -> AntiCheatService:
    service = getattr(request.app.state, 'service', None)
    if service is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return service

def get_rate_limiter(request: Request):
    return getattr(request.app.state, 'rate_limiter', None)

def get_score_store(request: Request):
    return getattr(request.app.state, 'score_store', None)
