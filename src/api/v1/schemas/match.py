"""Pydantic schemas for match and message announcements."""

from pydantic import BaseModel


class MatchCreate(BaseModel):
    """Announce a mutual match with another profile."""

    other_profile_id: str


class MatchResponse(BaseModel):
    """Announced match."""

    match_id: str
    user_id_1: str
    user_id_2: str


class MatchDetailResponse(BaseModel):
    """Schema for single match response."""

    data: MatchResponse


class MessageCreate(BaseModel):
    """Send a message to another profile."""

    recipient_id: str
    content: str
