"""
Pydantic response models for listing endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class CreatedResponse(BaseModel):
    id: int


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
