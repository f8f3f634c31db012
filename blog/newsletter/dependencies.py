"""FastAPI dependencies for the newsletter."""

from typing import Annotated

from fastapi import Depends

from blog.core.dependencies import from_app_state

from .service import NewsletterService


get_newsletter_service = from_app_state("newsletter_service", "Newsletter")

NewsletterServiceDep = Annotated[NewsletterService, Depends(get_newsletter_service)]
