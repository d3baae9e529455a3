# negotiation_service/schemas/comment.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class CommentType(str, Enum):
    GENERAL = "general"
    STATUS_UPDATE = "status_update"


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    comment_type: CommentType = CommentType.GENERAL


class CommentOut(BaseModel):
    id: str
    request_id: str
    author_id: str
    comment_type: CommentType
    content: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
