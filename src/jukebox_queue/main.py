#!/usr/bin/env python3
"""Main entry point for the jukebox queue command-line interface."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from collections.abc import Awaitable, Callable, Sequence
from decimal import Decimal
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from jukebox_queue.domain.shared.exceptions import DomainError
from jukebox_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from jukebox_queue.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_OK = 0
EXIT_DOMAIN_ERROR = 2


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        from jukebox_queue.utils.logging import ColoredFormatter

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColoredFormatter(_LOG_FORMAT, _DATE_FORMAT, stream=sys.stderr))
        logging.basicConfig(level=resolved_level, handlers=[handler])
        logging.getLogger(__name__).warning(
            "Could not load %s, falling back to basic config", _LOGGING_CONFIG_PATH
        )

    logging.getLogger().setLevel(resolved_level)


# =============================================================================
# Argument parsing
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jukebox-queue",
        description="Run venue music queue operations against a local database.",
    )
    parser.add_argument("--database-url", help="Override DATABASE__URL (sqlite:///path.db)")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    groups = parser.add_subparsers(dest="group", required=True)

    # user
    user = groups.add_parser("user", help="Manage wallets").add_subparsers(
        dest="action", required=True
    )
    add_user = user.add_parser("add", help="Create a user with the welcome balance")
    add_user.add_argument("display_name")
    balance = user.add_parser("balance", help="Show a user's balance")
    balance.add_argument("user_id", type=int)
    reconcile = user.add_parser("reconcile", help="Replay a user's ledger")
    reconcile.add_argument("user_id", type=int)

    # venue
    venue = groups.add_parser("venue", help="Manage venues").add_subparsers(
        dest="action", required=True
    )
    add_venue = venue.add_parser("add", help="Create a venue")
    add_venue.add_argument("name")
    add_venue.add_argument("--host", type=int, required=True, dest="host_user_id")
    add_venue.add_argument("--base-price", type=int, dest="base_price_cents")
    add_venue.add_argument("--min-price", type=int, dest="min_price_cents")
    add_venue.add_argument("--max-price", type=int, dest="max_price_cents")
    add_venue.add_argument("--multiplier", type=Decimal, dest="price_multiplier")
    add_venue.add_argument("--peak-start", type=int, dest="peak_hours_start")
    add_venue.add_argument("--peak-end", type=int, dest="peak_hours_end")
    add_venue.add_argument("--peak-multiplier", type=Decimal, dest="peak_hours_multiplier")
    add_venue.add_argument("--timezone")
    add_venue.add_argument(
        "--no-pricing", action="store_false", dest="pricing_enabled", default=None
    )

    # session
    session = groups.add_parser("session", help="Host session actions").add_subparsers(
        dest="action", required=True
    )
    create = session.add_parser("create", help="Open a session for a venue")
    create.add_argument("venue_id", type=int)
    create.add_argument("--actor", type=int, required=True, dest="actor_id")
    for name in ("pause", "resume", "end"):
        host_action = session.add_parser(name, help=f"{name.capitalize()} a session")
        host_action.add_argument("session_id", type=int)
        host_action.add_argument("--actor", type=int, required=True, dest="actor_id")
    for name in ("play-next", "stop"):
        session.add_parser(name, help=f"Playback: {name}").add_argument("session_id", type=int)

    # item
    item = groups.add_parser("item", help="Queue item actions").add_subparsers(
        dest="action", required=True
    )
    submit = item.add_parser("submit", help="Add a song to a session's queue")
    submit.add_argument("session_id", type=int)
    submit.add_argument("title")
    submit.add_argument("--user", type=int, required=True, dest="user_id")
    submit.add_argument("--artist")
    submit.add_argument("--position", dest="desired_position")
    submit.add_argument("--paid", type=int, dest="paid_amount_cents")
    vote = item.add_parser("vote", help="Vote on a pending item")
    vote.add_argument("item_id", type=int)
    vote.add_argument("--down", action="store_const", const=-1, default=1, dest="delta")
    refund = item.add_parser("refund", help="Refund an item's payment")
    refund.add_argument("item_id", type=int)
    refund.add_argument("--actor", type=int, required=True, dest="actor_id")
    refund.add_argument("--amount", type=int, dest="amount_cents")

    # reads
    prices = groups.add_parser("prices", help="Quote prices for a session")
    prices.add_argument("session_id", type=int)
    prices.add_argument("--position", help="Quote one position with its factors")
    queue = groups.add_parser("queue", help="Show a session's queue")
    queue.add_argument("session_id", type=int)

    return parser


# =============================================================================
# Command dispatch
# =============================================================================


async def _user(container: Container, args: argparse.Namespace) -> Any:
    from jukebox_queue.application.services.queue_models import BalanceView

    ledger = container.ledger_service
    if args.action == "add":
        user = await ledger.open_account(args.display_name)
        return BalanceView.of(user.id, user.balance_cents)
    if args.action == "balance":
        user = await ledger.get_user(args.user_id)
        return BalanceView.of(user.id, user.balance_cents)
    return await ledger.reconcile(args.user_id)


async def _venue(container: Container, args: argparse.Namespace) -> Any:
    from jukebox_queue.domain.venue.entities import Venue

    await container.ledger_service.get_user(args.host_user_id)
    overrides = {
        field: getattr(args, field)
        for field in (
            "pricing_enabled",
            "base_price_cents",
            "min_price_cents",
            "max_price_cents",
            "price_multiplier",
            "peak_hours_start",
            "peak_hours_end",
            "peak_hours_multiplier",
            "timezone",
        )
        if getattr(args, field) is not None
    }
    return await container.venue_repository.add(
        Venue(name=args.name, host_user_id=args.host_user_id, **overrides)
    )


async def _session(container: Container, args: argparse.Namespace) -> Any:
    sessions = container.session_service
    if args.action == "create":
        return await sessions.create(args.venue_id, args.actor_id)
    if args.action == "pause":
        return await sessions.pause(args.session_id, args.actor_id)
    if args.action == "resume":
        return await sessions.resume(args.session_id, args.actor_id)
    if args.action == "end":
        return await sessions.end(args.session_id, args.actor_id)
    if args.action == "play-next":
        return await container.playback_service.play_next(args.session_id)
    await container.playback_service.stop_playback(args.session_id)
    return {"sessionId": args.session_id, "stopped": True}


async def _item(container: Container, args: argparse.Namespace) -> Any:
    from jukebox_queue.application.commands import (
        CastVoteCommand,
        RefundItemCommand,
        SubmitItemCommand,
    )

    if args.action == "submit":
        return await container.submit_item_handler.handle(
            SubmitItemCommand(
                session_id=args.session_id,
                user_id=args.user_id,
                title=args.title,
                artist=args.artist,
                desired_position=args.desired_position,
                paid_amount_cents=args.paid_amount_cents,
            )
        )
    if args.action == "vote":
        return await container.cast_vote_handler.handle(
            CastVoteCommand(item_id=args.item_id, delta=args.delta)
        )
    return await container.refund_item_handler.handle(
        RefundItemCommand(
            item_id=args.item_id,
            actor_id=args.actor_id,
            amount_cents=args.amount_cents,
            description=container.settings.ledger.refund_description,
        )
    )


async def _prices(container: Container, args: argparse.Namespace) -> Any:
    handler = container.pricing_query_handler
    if args.position is not None:
        return await handler.position_price(args.session_id, args.position)
    return await handler.current_prices(args.session_id)


async def _queue(container: Container, args: argparse.Namespace) -> Any:
    from jukebox_queue.application.queries import GetQueueQuery

    return await container.get_queue_handler.handle(GetQueueQuery(session_id=args.session_id))


_DISPATCH: dict[str, Callable[[Container, argparse.Namespace], Awaitable[Any]]] = {
    "user": _user,
    "venue": _venue,
    "session": _session,
    "item": _item,
    "prices": _prices,
    "queue": _queue,
}


def _to_payload(result: Any) -> Any:
    if hasattr(result, "to_payload"):
        return result.to_payload()
    if hasattr(result, "model_dump"):
        return result.model_dump(mode="json")
    return result


async def run_command(container: Container, args: argparse.Namespace) -> Any:
    """Initialize the container, run one command and return its JSON payload."""
    await container.initialize()
    try:
        return _to_payload(await _DISPATCH[args.group](container, args))
    finally:
        await container.shutdown()


def main(argv: Sequence[str] | None = None) -> int:
    from jukebox_queue.config.settings import get_settings

    args = build_parser().parse_args(argv)
    settings = get_settings()

    overrides: dict[str, Any] = {}
    if args.database_url:
        overrides["database"] = settings.database.model_copy(update={"url": args.database_url})
    if args.log_level:
        overrides["log_level"] = args.log_level.upper()
    if overrides:
        settings = settings.model_copy(update=overrides)

    setup_logging(settings.log_level)
    logger = logging.getLogger(__name__)
    logger.debug(LogTemplates.APP_STARTING, settings.environment)

    from jukebox_queue.config.container import create_container

    container = create_container(settings)
    command = " ".join(filter(None, (args.group, getattr(args, "action", None))))

    try:
        payload = asyncio.run(run_command(container, args))
    except DomainError as e:
        logger.warning(LogTemplates.APP_COMMAND_FAILED, command, e.message)
        print(json.dumps({"error": e.code, "message": e.message}))
        return EXIT_DOMAIN_ERROR
    except PydanticValidationError as e:
        logger.warning(LogTemplates.APP_COMMAND_FAILED, command, e)
        print(json.dumps({"error": "VALIDATION_ERROR", "message": str(e)}))
        return EXIT_DOMAIN_ERROR

    print(json.dumps(payload))
    return EXIT_OK


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
