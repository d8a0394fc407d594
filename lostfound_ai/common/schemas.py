from pydantic import BaseModel
from typing import List, Optional


class CreateItemResponse(BaseModel):
    success: bool
    message: str
    itemId: Optional[str] = None


class MatchResponse(BaseModel):
    success: bool
    queryId: Optional[str] = None
    targetStatus: Optional[str] = None
    message: Optional[str] = None
    matches: List[dict] = []


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
