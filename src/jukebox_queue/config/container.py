"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for repositories, services and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.commands.cast_vote import CastVoteHandler
    from ..application.commands.refund_item import RefundItemHandler
    from ..application.commands.submit_item import SubmitItemHandler
    from ..application.interfaces.join_codes import JoinCodeRegistry
    from ..application.queries.get_prices import PricingQueryHandler
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.services.ledger_service import LedgerApplicationService
    from ..application.services.playback_service import PlaybackApplicationService
    from ..application.services.session_service import SessionApplicationService
    from ..domain.ledger.repository import LedgerRepository
    from ..domain.queue.repository import QueueItemRepository, SessionRepository
    from ..domain.venue.pricing import PricingPolicy
    from ..domain.venue.repository import VenueRepository
    from ..infrastructure.persistence.database import Database
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings

    # Persistence layer
    _database: Database | None = None
    _venue_repository: VenueRepository | None = None
    _session_repository: SessionRepository | None = None
    _item_repository: QueueItemRepository | None = None
    _ledger_repository: LedgerRepository | None = None
    _join_codes: JoinCodeRegistry | None = None

    # Domain services
    _pricing_policy: PricingPolicy | None = None

    # Application services
    _ledger_service: LedgerApplicationService | None = None
    _playback_service: PlaybackApplicationService | None = None
    _session_service: SessionApplicationService | None = None

    # Command handlers
    _submit_item_handler: SubmitItemHandler | None = None
    _cast_vote_handler: CastVoteHandler | None = None
    _refund_item_handler: RefundItemHandler | None = None

    # Query handlers
    _get_queue_handler: GetQueueHandler | None = None
    _pricing_query_handler: PricingQueryHandler | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def venue_repository(self) -> VenueRepository:
        """Get the venue repository."""
        if self._venue_repository is None:
            from ..infrastructure.persistence.repositories.venue_repository import (
                SQLiteVenueRepository,
            )

            self._venue_repository = SQLiteVenueRepository(self.database)
        return self._venue_repository

    @property
    def session_repository(self) -> SessionRepository:
        """Get the session repository."""
        if self._session_repository is None:
            from ..infrastructure.persistence.repositories.session_repository import (
                SQLiteSessionRepository,
            )

            self._session_repository = SQLiteSessionRepository(self.database)
        return self._session_repository

    @property
    def item_repository(self) -> QueueItemRepository:
        """Get the queue item repository."""
        if self._item_repository is None:
            from ..infrastructure.persistence.repositories.queue_item_repository import (
                SQLiteQueueItemRepository,
            )

            self._item_repository = SQLiteQueueItemRepository(self.database)
        return self._item_repository

    @property
    def ledger_repository(self) -> LedgerRepository:
        """Get the ledger repository."""
        if self._ledger_repository is None:
            from ..infrastructure.persistence.repositories.ledger_repository import (
                SQLiteLedgerRepository,
            )

            self._ledger_repository = SQLiteLedgerRepository(self.database)
        return self._ledger_repository

    @property
    def join_codes(self) -> JoinCodeRegistry:
        """Get the join code registry."""
        if self._join_codes is None:
            from ..infrastructure.persistence.repositories.join_code_registry import (
                SQLiteJoinCodeRegistry,
            )

            self._join_codes = SQLiteJoinCodeRegistry(self.database)
        return self._join_codes

    # === Domain Services ===

    @property
    def pricing_policy(self) -> PricingPolicy:
        """Get the pricing policy."""
        if self._pricing_policy is None:
            from ..domain.venue.pricing import PricingPolicy

            self._pricing_policy = PricingPolicy(self.settings.pricing.position_exponent)
        return self._pricing_policy

    # === Application Services ===

    @property
    def ledger_service(self) -> LedgerApplicationService:
        """Get the ledger application service."""
        if self._ledger_service is None:
            from ..application.services.ledger_service import LedgerApplicationService

            ledger = self.settings.ledger
            self._ledger_service = LedgerApplicationService(
                ledger_repository=self.ledger_repository,
                initial_balance_cents=ledger.initial_balance_cents,
                initial_description=ledger.initial_description,
                debit_description=ledger.debit_description,
                refund_description=ledger.refund_description,
            )
        return self._ledger_service

    @property
    def playback_service(self) -> PlaybackApplicationService:
        """Get the playback application service."""
        if self._playback_service is None:
            from ..application.services.playback_service import PlaybackApplicationService

            self._playback_service = PlaybackApplicationService(
                session_repository=self.session_repository,
                item_repository=self.item_repository,
            )
        return self._playback_service

    @property
    def session_service(self) -> SessionApplicationService:
        """Get the session application service."""
        if self._session_service is None:
            from ..application.services.session_service import SessionApplicationService

            self._session_service = SessionApplicationService(
                session_repository=self.session_repository,
                venue_repository=self.venue_repository,
                join_codes=self.join_codes,
            )
        return self._session_service

    # === Command Handlers ===

    @property
    def submit_item_handler(self) -> SubmitItemHandler:
        """Get the submit item command handler."""
        if self._submit_item_handler is None:
            from ..application.commands.submit_item import SubmitItemHandler

            self._submit_item_handler = SubmitItemHandler(
                session_repository=self.session_repository,
                venue_repository=self.venue_repository,
                item_repository=self.item_repository,
                ledger_repository=self.ledger_repository,
                pricing_policy=self.pricing_policy,
                debit_description=self.settings.ledger.debit_description,
            )
        return self._submit_item_handler

    @property
    def cast_vote_handler(self) -> CastVoteHandler:
        """Get the cast vote command handler."""
        if self._cast_vote_handler is None:
            from ..application.commands.cast_vote import CastVoteHandler

            self._cast_vote_handler = CastVoteHandler(
                session_repository=self.session_repository,
                item_repository=self.item_repository,
            )
        return self._cast_vote_handler

    @property
    def refund_item_handler(self) -> RefundItemHandler:
        """Get the refund item command handler."""
        if self._refund_item_handler is None:
            from ..application.commands.refund_item import RefundItemHandler

            self._refund_item_handler = RefundItemHandler(
                session_repository=self.session_repository,
                venue_repository=self.venue_repository,
                item_repository=self.item_repository,
            )
        return self._refund_item_handler

    # === Query Handlers ===

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        """Get the queue query handler."""
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(
                session_repository=self.session_repository,
                venue_repository=self.venue_repository,
                item_repository=self.item_repository,
                pricing_policy=self.pricing_policy,
            )
        return self._get_queue_handler

    @property
    def pricing_query_handler(self) -> PricingQueryHandler:
        """Get the pricing query handler."""
        if self._pricing_query_handler is None:
            from ..application.queries.get_prices import PricingQueryHandler

            self._pricing_query_handler = PricingQueryHandler(
                session_repository=self.session_repository,
                venue_repository=self.venue_repository,
                item_repository=self.item_repository,
                pricing_policy=self.pricing_policy,
                quoted_positions=self.settings.pricing.quoted_positions,
            )
        return self._pricing_query_handler

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize all async resources."""
        await self.database.initialize()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
