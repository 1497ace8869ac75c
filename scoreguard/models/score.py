# --- Pydantic Models ---
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Optional

class ScoreSubmission(BaseModel):
    """
    Final score reported by a client.

    Every field is optional and untyped on purpose: malformed submissions
    must reach the validator and come back as a verdict, not a 422.
    """
    user_id: Any = None
    game_id: Any = None
    score: Any = None
    session_id: Any = None
    duration: Any = None
    checksum: Any = None

class StartSessionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=100)
    game_id: str = Field(..., min_length=1, max_length=100)

    @field_validator('user_id', 'game_id')
    @classmethod
    def validate_id(cls, v):
        if not v.strip():
            raise ValueError('ID cannot be empty or whitespace')
        return v.strip()

class ActionRequest(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    data: Optional[Dict[str, Any]] = None

class ProgressRequest(BaseModel):
    score: float = Field(..., ge=0)
