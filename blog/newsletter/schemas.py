"""Pydantic schemas for the newsletter."""

from pydantic import BaseModel, EmailStr, Field


class SubscriptionRequest(BaseModel):
    email: EmailStr = Field(..., description="Email address")


class SubscriptionResponse(BaseModel):
    message: str
    email: str


class NewsletterStatsResponse(BaseModel):
    total_subscribers: int
    subscribers: list[str]
