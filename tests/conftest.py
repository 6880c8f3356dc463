from datetime import UTC, datetime

import pytest
import pytest_asyncio

OFF_PEAK = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
PEAK = datetime(2026, 10, 19, 20, 30, tzinfo=UTC)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from jukebox_queue.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def file_database(tmp_path):
    """File-backed database for tests that run writers concurrently."""
    from jukebox_queue.infrastructure.persistence.database import Database

    db = Database(f"sqlite:///{tmp_path / 'jukebox.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def ledger_repository(in_memory_database):
    from jukebox_queue.infrastructure.persistence.repositories.ledger_repository import (
        SQLiteLedgerRepository,
    )

    return SQLiteLedgerRepository(in_memory_database)


@pytest_asyncio.fixture
async def venue_repository(in_memory_database):
    from jukebox_queue.infrastructure.persistence.repositories.venue_repository import (
        SQLiteVenueRepository,
    )

    return SQLiteVenueRepository(in_memory_database)


@pytest_asyncio.fixture
async def session_repository(in_memory_database):
    from jukebox_queue.infrastructure.persistence.repositories.session_repository import (
        SQLiteSessionRepository,
    )

    return SQLiteSessionRepository(in_memory_database)


@pytest_asyncio.fixture
async def item_repository(in_memory_database):
    from jukebox_queue.infrastructure.persistence.repositories.queue_item_repository import (
        SQLiteQueueItemRepository,
    )

    return SQLiteQueueItemRepository(in_memory_database)


@pytest_asyncio.fixture
async def join_codes(in_memory_database):
    from jukebox_queue.infrastructure.persistence.repositories.join_code_registry import (
        SQLiteJoinCodeRegistry,
    )

    return SQLiteJoinCodeRegistry(in_memory_database)


# ============================================================================
# Seeded Data Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def host(ledger_repository):
    """Venue host with the default welcome balance."""
    return await ledger_repository.create_user("Host", 10_000, "Welcome bonus")


@pytest_asyncio.fixture
async def guest(ledger_repository):
    """Guest with the default welcome balance."""
    return await ledger_repository.create_user("Guest", 10_000, "Welcome bonus")


@pytest_asyncio.fixture
async def venue(venue_repository, host):
    """Venue with base price 100, bounds 1..50000 and a 19-23 UTC peak window."""
    from jukebox_queue.domain.venue.entities import Venue

    return await venue_repository.add(Venue(name="The Basement", host_user_id=host.id))


@pytest_asyncio.fixture
async def session(session_repository, venue):
    """Active session for the seeded venue."""
    from jukebox_queue.domain.queue.entities import QueueSession

    return await session_repository.add(
        QueueSession.build(venue_id=venue.id, join_code="123456", now=OFF_PEAK)
    )


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def pricing_policy():
    from jukebox_queue.domain.venue.pricing import PricingPolicy

    return PricingPolicy()


@pytest.fixture
def playback_service(session_repository, item_repository):
    from jukebox_queue.application.services.playback_service import PlaybackApplicationService

    return PlaybackApplicationService(
        session_repository=session_repository,
        item_repository=item_repository,
        clock=lambda: OFF_PEAK,
    )


@pytest.fixture
def session_service(session_repository, venue_repository, join_codes):
    from jukebox_queue.application.services.session_service import SessionApplicationService

    return SessionApplicationService(
        session_repository=session_repository,
        venue_repository=venue_repository,
        join_codes=join_codes,
        clock=lambda: OFF_PEAK,
    )


@pytest.fixture
def submit_handler(
    session_repository, venue_repository, item_repository, ledger_repository, pricing_policy
):
    from jukebox_queue.application.commands.submit_item import SubmitItemHandler

    return SubmitItemHandler(
        session_repository=session_repository,
        venue_repository=venue_repository,
        item_repository=item_repository,
        ledger_repository=ledger_repository,
        pricing_policy=pricing_policy,
        clock=lambda: OFF_PEAK,
    )


@pytest.fixture
def make_item(item_repository):
    """Insert an item directly, bypassing pricing and the ledger."""
    from jukebox_queue.domain.queue.entities import QueueItem

    async def _make(session_id: int, title: str, **fields):
        item = QueueItem(session_id=session_id, title=title, **fields)
        stored, _ = await item_repository.add(item)
        return stored

    return _make


@pytest.fixture
def queue_handler(session_repository, venue_repository, item_repository, pricing_policy):
    from jukebox_queue.application.queries.get_queue import GetQueueHandler

    return GetQueueHandler(
        session_repository=session_repository,
        venue_repository=venue_repository,
        item_repository=item_repository,
        pricing_policy=pricing_policy,
        clock=lambda: OFF_PEAK,
    )
