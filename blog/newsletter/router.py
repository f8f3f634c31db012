"""Newsletter API endpoints."""

from fastapi import APIRouter

from blog.auth.dependencies import AdminUser
from blog.core.exceptions import BlogError, handle_blog_error

from .dependencies import NewsletterServiceDep
from .schemas import (
    NewsletterStatsResponse,
    SubscriptionRequest,
    SubscriptionResponse,
)


router = APIRouter(prefix="/v1/newsletter", tags=["newsletter"])


@router.post("/subscribe", response_model=SubscriptionResponse)
async def subscribe(
    data: SubscriptionRequest,
    service: NewsletterServiceDep,
) -> SubscriptionResponse:
    try:
        subscriber = await service.subscribe(data.email)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return SubscriptionResponse(
        message="Successfully subscribed to newsletter",
        email=subscriber.email,
    )


@router.post("/unsubscribe", response_model=SubscriptionResponse)
async def unsubscribe(
    data: SubscriptionRequest,
    service: NewsletterServiceDep,
) -> SubscriptionResponse:
    """Unsubscribe an address. Succeeds even if it was never subscribed."""
    try:
        await service.unsubscribe(data.email)
    except BlogError as e:
        raise handle_blog_error(e) from e
    return SubscriptionResponse(
        message="Successfully unsubscribed from newsletter",
        email=data.email.lower(),
    )


@router.get("/stats", response_model=NewsletterStatsResponse)
async def newsletter_stats(
    service: NewsletterServiceDep,
    _admin: AdminUser,
) -> NewsletterStatsResponse:
    try:
        subscribers = await service.list_subscribers()
    except BlogError as e:
        raise handle_blog_error(e) from e
    return NewsletterStatsResponse(
        total_subscribers=len(subscribers),
        subscribers=[s.email for s in subscribers],
    )
