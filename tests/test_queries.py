"""
Tests for Read-Side Queries

Tests for:
- PricingQueryHandler: current_prices, position_price, factors
- GetQueueHandler: now playing, display order, up next
- Jump-ahead prices and the guaranteed-position bump flag
"""

from datetime import UTC, datetime

import pytest

from jukebox_queue.application.queries.get_prices import PricingQueryHandler, parse_position
from jukebox_queue.application.queries.get_queue import GetQueueHandler, GetQueueQuery
from jukebox_queue.domain.queue.value_objects import SessionStatus
from jukebox_queue.domain.shared.exceptions import InvalidPositionError, SessionNotFoundError

PEAK = datetime(2026, 10, 19, 20, 30, tzinfo=UTC)
OFF_PEAK = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def pricing_handler(session_repository, venue_repository, item_repository, pricing_policy):
    return PricingQueryHandler(
        session_repository=session_repository,
        venue_repository=venue_repository,
        item_repository=item_repository,
        pricing_policy=pricing_policy,
        clock=lambda: OFF_PEAK,
    )


# =============================================================================
# Pricing Queries
# =============================================================================


class TestCurrentPrices:
    async def test_payload_contract(self, pricing_handler, session):
        """Should return ten camelCase quotes plus the factors of position 1."""
        payload = (await pricing_handler.current_prices(session.id)).to_payload()

        assert set(payload) == {"sessionId", "positions", "factors"}
        assert len(payload["positions"]) == 10
        assert payload["positions"][0] == {
            "position": 1,
            "priceCents": 100,
            "priceDisplay": "$1.00",
        }
        assert payload["positions"][1]["priceDisplay"] == "$0.50"
        assert payload["factors"]["position"] == 1
        assert payload["factors"]["priceCents"] == 100

    async def test_quoted_positions_configurable(
        self, session_repository, venue_repository, item_repository, pricing_policy, session
    ):
        """Should quote as many positions as configured."""
        handler = PricingQueryHandler(
            session_repository=session_repository,
            venue_repository=venue_repository,
            item_repository=item_repository,
            pricing_policy=pricing_policy,
            quoted_positions=3,
            clock=lambda: PEAK,
        )

        view = await handler.current_prices(session.id)

        assert [q.price_cents for q in view.positions] == [150, 75, 50]
        assert view.factors.peak_applied is True

    async def test_reports_queue_length(self, pricing_handler, session, make_item):
        """Should report the unplayed count alongside the factors."""
        await make_item(session.id, "One")
        await make_item(session.id, "Two")

        view = await pricing_handler.current_prices(session.id)

        assert view.factors.queue_length == 2

    async def test_unknown_session(self, pricing_handler):
        """Should raise SessionNotFoundError for missing sessions."""
        with pytest.raises(SessionNotFoundError):
            await pricing_handler.current_prices(77)


class TestPositionPrice:
    async def test_single_position(self, pricing_handler, session):
        """Should quote one position with its factor breakdown."""
        payload = (await pricing_handler.position_price(session.id, "4")).to_payload()

        assert payload["position"] == 4
        assert payload["priceCents"] == 25
        assert payload["priceDisplay"] == "$0.25"
        assert payload["factors"]["weight"] == 0.25

    async def test_factors_only(self, pricing_handler, session):
        """Should return only the factor breakdown."""
        factors = await pricing_handler.factors(session.id, 2)

        assert factors.price_cents == 50
        assert factors.raw_price_cents == 50

    @pytest.mark.parametrize("position", [0, -1, "0", "-5", "abc", "2.5", True])
    async def test_invalid_positions(self, pricing_handler, session, position):
        """Should raise InvalidPositionError for non-positive or non-integer positions."""
        with pytest.raises(InvalidPositionError):
            await pricing_handler.position_price(session.id, position)

    def test_parse_position(self):
        """Should parse integer strings and pass integers through."""
        assert parse_position(" 7 ") == 7
        assert parse_position(3) == 3


# =============================================================================
# Queue View
# =============================================================================


class TestQueueView:
    async def test_empty_queue(self, queue_handler, session):
        """Should describe an empty session."""
        view = await queue_handler.handle(GetQueueQuery(session_id=session.id))

        assert view.status is SessionStatus.ACTIVE
        assert view.items == []
        assert view.now_playing is None
        assert view.up_next is None
        assert view.songs_count == 0

    async def test_display_order_and_up_next(
        self, queue_handler, playback_service, session, make_item
    ):
        """Should list pending items in display order and point at the playback head."""
        playing = await make_item(session.id, "Now")
        organic = await make_item(session.id, "Organic", vote_score=0)
        popular = await make_item(session.id, "Popular", vote_score=5)
        bought = await make_item(
            session.id, "Bought", base_priority=-1, position_paid_cents=100, inserted_at_position=1
        )
        await playback_service.play_track(session.id, playing.id)

        view = await queue_handler.handle(GetQueueQuery(session_id=session.id))

        assert view.now_playing.id == playing.id
        assert [item.id for item in view.items] == [bought.id, organic.id, popular.id]
        assert [item.position for item in view.items] == [1, 2, 3]
        assert view.up_next.id == bought.id
        assert view.songs_count == 3
        assert view.items[0].price_display == "$1.00"
        assert view.items[1].price_display == "Free"

    async def test_payload_uses_camel_case(self, queue_handler, session, make_item):
        """Should serialize the view with camelCase keys."""
        await make_item(session.id, "Song")

        payload = (await queue_handler.handle(GetQueueQuery(session_id=session.id))).to_payload()

        assert {"sessionId", "joinCode", "nowPlaying", "upNext", "songsCount"} <= set(payload)
        assert {
            "voteScore",
            "basePriority",
            "priceDisplay",
            "wasBumped",
            "positionGuaranteed",
            "jumpAheadPriceCents",
            "jumpAheadPriceDisplay",
        } <= set(payload["items"][0])

    async def test_unknown_session(self, queue_handler):
        """Should raise SessionNotFoundError for missing sessions."""
        with pytest.raises(SessionNotFoundError):
            await queue_handler.handle(GetQueueQuery(session_id=404))


class TestJumpAheadPrices:
    async def test_price_of_each_slot(self, queue_handler, session, make_item):
        """Should quote the slot a purchase aimed at each item would receive."""
        bought = await make_item(
            session.id,
            "Bought",
            base_priority=-1,
            position_paid_cents=100,
            inserted_at_position=1,
            position_guaranteed=True,
        )
        await make_item(session.id, "Organic A")
        await make_item(session.id, "Organic B")

        view = await queue_handler.handle(GetQueueQuery(session_id=session.id))

        assert view.items[0].id == bought.id
        assert [item.jump_ahead_price_cents for item in view.items] == [100, 50, 50]
        assert [item.jump_ahead_price_display for item in view.items] == [
            "$1.00",
            "$0.50",
            "$0.50",
        ]

    async def test_peak_hours(
        self,
        session_repository,
        venue_repository,
        item_repository,
        pricing_policy,
        session,
        make_item,
    ):
        """Should apply the peak multiplier to jump-ahead prices."""
        await make_item(session.id, "Organic")
        handler = GetQueueHandler(
            session_repository=session_repository,
            venue_repository=venue_repository,
            item_repository=item_repository,
            pricing_policy=pricing_policy,
            clock=lambda: PEAK,
        )

        view = await handler.handle(GetQueueQuery(session_id=session.id))

        assert view.items[0].jump_ahead_price_cents == 150
        assert view.items[0].jump_ahead_price_display == "$1.50"

    async def test_now_playing_is_free(self, queue_handler, playback_service, session, make_item):
        """Should not price jumping the item that is already playing."""
        playing = await make_item(session.id, "Now")
        await playback_service.play_track(session.id, playing.id)

        view = await queue_handler.handle(GetQueueQuery(session_id=session.id))

        assert view.now_playing.jump_ahead_price_cents == 0
        assert view.now_playing.jump_ahead_price_display == "Free"


class TestBumpedFlag:
    async def test_only_guaranteed_positions_report_bumps(self, queue_handler, session, make_item):
        """Should flag a bump only for items whose position was guaranteed."""
        guaranteed = await make_item(
            session.id,
            "Guaranteed",
            base_priority=-1,
            inserted_at_position=1,
            position_guaranteed=True,
        )
        loose = await make_item(session.id, "Loose", base_priority=-1, inserted_at_position=2)
        await make_item(
            session.id,
            "Jumper",
            base_priority=-2,
            inserted_at_position=1,
            position_guaranteed=True,
        )

        view = await queue_handler.handle(GetQueueQuery(session_id=session.id))

        flags = {item.id: item.was_bumped for item in view.items}
        assert flags[guaranteed.id] is True
        assert flags[loose.id] is False
        assert {item.id: item.position for item in view.items}[loose.id] == 3
