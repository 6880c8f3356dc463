"""
Unit Tests for Dependency Injection Container

Tests for:
- Container initialization with settings
- Lazy initialization and caching of repositories, services and handlers
- Settings flowing into the components they configure
- Lifecycle methods (initialize, shutdown)
"""

import pytest

from jukebox_queue.config.container import Container, create_container
from jukebox_queue.config.settings import (
    DatabaseSettings,
    LedgerSettings,
    PricingSettings,
    Settings,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database=DatabaseSettings(url="sqlite:///:memory:"),
        pricing=PricingSettings(quoted_positions=4, position_exponent=2.0),
        ledger=LedgerSettings(initial_balance_cents=500, debit_description="Jump"),
    )


@pytest.fixture
def container(settings):
    return Container(settings=settings)


class TestContainerInitialization:
    def test_create_container_factory(self, settings):
        """Should create container using factory function."""
        container = create_container(settings)

        assert isinstance(container, Container)
        assert container.settings is settings

    def test_initial_state_all_none(self, container):
        """Should create nothing until a property is accessed."""
        assert container._database is None
        assert container._ledger_repository is None
        assert container._session_service is None
        assert container._submit_item_handler is None
        assert container._pricing_query_handler is None


class TestLazyInitialization:
    @pytest.mark.parametrize(
        "name",
        [
            "database",
            "venue_repository",
            "session_repository",
            "item_repository",
            "ledger_repository",
            "join_codes",
            "pricing_policy",
            "ledger_service",
            "playback_service",
            "session_service",
            "submit_item_handler",
            "cast_vote_handler",
            "refund_item_handler",
            "get_queue_handler",
            "pricing_query_handler",
        ],
    )
    def test_property_is_cached(self, container, name):
        """Should return the same instance on every access."""
        assert getattr(container, name) is getattr(container, name)

    def test_repositories_share_database(self, container):
        """Should build every repository on the one Database instance."""
        assert container.ledger_repository._db is container.database
        assert container.item_repository._db is container.database

    def test_queue_handler_prices_with_shared_policy(self, container):
        """Should hand the shared pricing policy to the queue view."""
        assert container.get_queue_handler._pricing is container.pricing_policy
        assert container.get_queue_handler._venues is container.venue_repository


class TestSettingsWiring:
    def test_pricing_policy_exponent(self, container):
        """Should build the pricing policy from the configured exponent."""
        assert container.pricing_policy.position_exponent == 2

    async def test_quoted_positions_and_welcome_balance(self, container):
        """Should apply the configured quote count and welcome balance."""
        from jukebox_queue.domain.queue.entities import QueueSession
        from jukebox_queue.domain.venue.entities import Venue

        await container.initialize()
        try:
            host = await container.ledger_service.open_account("Host")
            venue = await container.venue_repository.add(
                Venue(name="Wired", host_user_id=host.id)
            )
            session = await container.session_repository.add(
                QueueSession.build(venue_id=venue.id, join_code="246810")
            )

            view = await container.pricing_query_handler.current_prices(session.id)
        finally:
            await container.shutdown()

        assert host.balance_cents == 500
        assert len(view.positions) == 4

    async def test_shutdown_without_initialize(self, container):
        """Should shut down cleanly when nothing was created."""
        await container.shutdown()

        assert container._database is None
