import logging
from datetime import datetime, timezone
from typing import Any, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .config import Settings
from .exceptions import MalformedPayload, SignatureMismatch
from .integrations import get_integration
from .integrations.base import Notification
from .models import OrderTransaction

logger = logging.getLogger(__name__)


class NotificationHandler:
    """Turns provider callbacks into persisted order outcomes.

    A notification only reaches the database after it has been acknowledged;
    a rejected one leaves any existing order state untouched.
    """

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession], settings: Settings):
        self._sessionmaker = sessionmaker
        self._settings = settings

    def build_notification(
        self, integration: str, raw_body: Any, content_type: Optional[str] = None
    ) -> Notification:
        """Parse a callback body with the integration's notification class.

        Raises:
            UnknownIntegration: If ``integration`` is not registered
            MalformedPayload: If the body cannot be decoded
            ConfigurationError: If a credential needed to verify it is missing
        """
        module = get_integration(integration)
        config = self._settings.provider_config(integration)
        notification = module.Notification(raw_body, content_type, config)
        notification.check_configuration()
        return notification

    async def handle(
        self, integration: str, raw_body: Any, content_type: Optional[str] = None
    ) -> Tuple[Notification, OrderTransaction]:
        """Acknowledge a callback and record its outcome.

        Raises:
            UnknownIntegration: If ``integration`` is not registered
            MalformedPayload: If the body cannot be decoded or names no item
            SignatureMismatch: If the notification is not acknowledged
            ConfigurationError: If the integration's secret is not configured
        """
        notification = self.build_notification(integration, raw_body, content_type)

        if not notification.acknowledge():
            logger.warning(
                "Rejected %s notification for item %s", integration, notification.item_id
            )
            raise SignatureMismatch(
                f"{integration} notification for item {notification.item_id} was not acknowledged"
            )

        if not notification.item_id:
            raise MalformedPayload(f"{integration} notification carries no item id")

        transaction = await self._record(integration, notification)
        logger.info(
            "Recorded %s notification for item %s: %s",
            integration,
            notification.item_id,
            notification.status.value,
        )
        return notification, transaction

    async def _record(self, integration: str, notification: Notification) -> OrderTransaction:
        try:
            return await self._upsert(integration, notification)
        except IntegrityError:
            # A concurrent first notification for the same item inserted the row.
            logger.info(
                "Retrying %s notification for item %s after a concurrent insert",
                integration,
                notification.item_id,
            )
            return await self._upsert(integration, notification)

    async def _upsert(self, integration: str, notification: Notification) -> OrderTransaction:
        async with self._sessionmaker() as session:
            transaction = await self._find(session, integration, notification.item_id)
            if transaction is None:
                transaction = OrderTransaction(
                    integration=integration, item_id=notification.item_id, notification_count=0
                )
                session.add(transaction)

            transaction.transaction_id = notification.transaction_id
            transaction.amount = notification.amount
            transaction.currency = notification.currency
            transaction.status = notification.status.value
            transaction.status_code = notification.status_code
            transaction.test = notification.test
            transaction.payload = dict(notification.params)
            transaction.received_at = notification.received_at
            transaction.acknowledged_at = datetime.now(timezone.utc)
            transaction.notification_count += 1

            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise
            return transaction

    async def _find(
        self, session: AsyncSession, integration: str, item_id: str
    ) -> Optional[OrderTransaction]:
        result = await session.execute(
            select(OrderTransaction).where(
                OrderTransaction.integration == integration,
                OrderTransaction.item_id == item_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_transaction(self, integration: str, item_id: str) -> Optional[OrderTransaction]:
        async with self._sessionmaker() as session:
            return await self._find(session, integration, item_id)
