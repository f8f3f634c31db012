"""Newsletter service.

Subscribers are kept in their own table keyed by the lowercased address. The
welcome mail is handed off to the log only; no mail is sent from here.
"""

from blog.core.exceptions import ValidationFailedError
from blog.core.logging import get_logger
from blog.core.service import CassandraService

from .models import Subscriber


logger = get_logger(__name__)


class AlreadySubscribedError(ValidationFailedError):
    def __init__(self, message: str = "Email already subscribed"):
        super().__init__(message, code="already_subscribed")


def normalize_email(email: str) -> str:
    return email.strip().lower()


class NewsletterService(CassandraService):
    """Subscribe, unsubscribe and list subscribers."""

    def _prepare_statements(self) -> None:
        self._get_subscriber = self._prepare(
            "SELECT * FROM {keyspace}.newsletter_subscribers WHERE email = ?"
        )
        self._get_all_subscribers = self._prepare(
            "SELECT * FROM {keyspace}.newsletter_subscribers"
        )
        self._insert_subscriber = self._prepare("""
            INSERT INTO {keyspace}.newsletter_subscribers (email, subscribed_at)
            VALUES (?, ?)
        """)
        self._delete_subscriber = self._prepare(
            "DELETE FROM {keyspace}.newsletter_subscribers WHERE email = ?"
        )

    async def is_subscribed(self, email: str) -> bool:
        row = await self._fetch_one(self._get_subscriber, [normalize_email(email)])
        return row is not None

    async def subscribe(self, email: str) -> Subscriber:
        """Add an address to the registry.

        Raises:
            AlreadySubscribedError: If the address is already registered
        """
        subscriber = Subscriber(email=normalize_email(email))
        if await self.is_subscribed(subscriber.email):
            raise AlreadySubscribedError()

        await self._execute(
            self._insert_subscriber, [subscriber.email, subscriber.subscribed_at]
        )
        logger.info("newsletter_subscribed", email=subscriber.email)
        logger.info("newsletter_welcome_queued", email=subscriber.email)
        return subscriber

    async def unsubscribe(self, email: str) -> None:
        """Remove an address; unknown addresses are ignored."""
        email = normalize_email(email)
        await self._execute(self._delete_subscriber, [email])
        logger.info("newsletter_unsubscribed", email=email)

    async def list_subscribers(self) -> list[Subscriber]:
        """All subscribers, oldest first."""
        rows = await self._execute(self._get_all_subscribers)
        return sorted(map(Subscriber.from_row, rows), key=lambda s: s.subscribed_at)
