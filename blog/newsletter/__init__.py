"""Newsletter subscriber registry."""

from .models import NEWSLETTER_TABLES_CQL, Subscriber
from .service import NewsletterService


__all__ = ["NEWSLETTER_TABLES_CQL", "NewsletterService", "Subscriber"]
