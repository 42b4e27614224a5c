"""Schemas for the Telegram bot endpoints."""

from pydantic import BaseModel, Field
from typing import List, Optional


class TelegramInitRequest(BaseModel):
    token: str = Field(..., min_length=1, examples=["123456789:AAH..."], description="BotFather token")


class TelegramStatusResponse(BaseModel):
    configured: bool
    running: bool
    bot_name: Optional[str] = None


class SendMessageRequest(BaseModel):
    client_ids: List[int] = Field(default_factory=list, examples=[[1, 2]])
    message: str = Field("", examples=["Yarınki randevunuzu unutmayın!"])


class SendMessageResponse(BaseModel):
    success: List[int]
    failed: List[int]


class ReferenceCodeResponse(BaseModel):
    success: bool
    reference_code: str
    bot_name: str
