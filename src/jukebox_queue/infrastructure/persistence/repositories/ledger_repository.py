"""SQLite implementation of the balance ledger.

Balance changes go through ``apply_debit`` / ``apply_credit``, which take an
open transaction connection so other repositories can charge a user in the
same atomic unit as their own writes.

Debits use a conditional update (``balance_cents >= amount``) as the
compare-and-swap: two concurrent debits can never both pass against a
balance that only covers one of them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from jukebox_queue.domain.ledger.entities import BalanceTransaction, TransactionType, User
from jukebox_queue.domain.ledger.repository import LedgerRepository
from jukebox_queue.domain.ledger.services import LedgerDomainService
from jukebox_queue.domain.shared.datetime_utils import UtcDateTime, utcnow
from jukebox_queue.domain.shared.exceptions import InsufficientBalanceError, UserNotFoundError
from jukebox_queue.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


async def _current_balance(conn: aiosqlite.Connection, user_id: int) -> int | None:
    cursor = await conn.execute("SELECT balance_cents FROM users WHERE id = ?", (user_id,))
    row = await cursor.fetchone()
    return row["balance_cents"] if row else None


async def _append_entry(
    conn: aiosqlite.Connection,
    *,
    user_id: int,
    amount_cents: int,
    transaction_type: TransactionType,
    description: str,
    queue_item_id: int | None,
) -> BalanceTransaction:
    balance_after = await _current_balance(conn, user_id)
    if balance_after is None:
        raise UserNotFoundError(user_id)

    created_at = utcnow()
    cursor = await conn.execute(
        """
        INSERT INTO balance_transactions (
            user_id, amount_cents, transaction_type, balance_after_cents,
            description, queue_item_id, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            user_id,
            amount_cents,
            transaction_type.value,
            balance_after,
            description,
            queue_item_id,
            UtcDateTime(created_at).iso,
        ),
    )
    return BalanceTransaction(
        id=cursor.lastrowid,
        user_id=user_id,
        amount_cents=amount_cents,
        transaction_type=transaction_type,
        balance_after_cents=balance_after,
        description=description,
        queue_item_id=queue_item_id,
        created_at=created_at,
    )


async def apply_debit(
    conn: aiosqlite.Connection,
    *,
    user_id: int,
    amount_cents: int,
    description: str,
    queue_item_id: int | None = None,
) -> BalanceTransaction:
    """Take ``amount_cents`` from a user inside the caller's transaction.

    Raises:
        InsufficientBalanceError: If the balance does not cover the amount.
        UserNotFoundError: If the user does not exist.
    """
    LedgerDomainService.validate_amount(amount_cents)

    cursor = await conn.execute(
        """
        UPDATE users SET balance_cents = balance_cents - ?
        WHERE id = ? AND balance_cents >= ?
        """,
        (amount_cents, user_id, amount_cents),
    )
    if cursor.rowcount == 0:
        balance = await _current_balance(conn, user_id)
        if balance is None:
            raise UserNotFoundError(user_id)
        logger.info(LogTemplates.LEDGER_DEBIT_REJECTED, amount_cents, user_id)
        raise InsufficientBalanceError(user_id, amount_cents, balance)

    entry = await _append_entry(
        conn,
        user_id=user_id,
        amount_cents=-amount_cents,
        transaction_type=TransactionType.DEBIT,
        description=description,
        queue_item_id=queue_item_id,
    )
    logger.info(LogTemplates.LEDGER_DEBITED, amount_cents, user_id, entry.balance_after_cents)
    return entry


async def apply_credit(
    conn: aiosqlite.Connection,
    *,
    user_id: int,
    amount_cents: int,
    transaction_type: TransactionType,
    description: str,
    queue_item_id: int | None = None,
) -> BalanceTransaction:
    """Add ``amount_cents`` to a user inside the caller's transaction.

    Raises:
        UserNotFoundError: If the user does not exist.
    """
    LedgerDomainService.validate_amount(amount_cents)
    if not transaction_type.is_credit:
        raise ValueError(f"{transaction_type.value} is not a credit type")

    cursor = await conn.execute(
        "UPDATE users SET balance_cents = balance_cents + ? WHERE id = ?",
        (amount_cents, user_id),
    )
    if cursor.rowcount == 0:
        raise UserNotFoundError(user_id)

    entry = await _append_entry(
        conn,
        user_id=user_id,
        amount_cents=amount_cents,
        transaction_type=transaction_type,
        description=description,
        queue_item_id=queue_item_id,
    )
    logger.info(
        LogTemplates.LEDGER_CREDITED,
        amount_cents,
        user_id,
        transaction_type.value,
        entry.balance_after_cents,
    )
    return entry


def row_to_transaction(row: dict[str, Any]) -> BalanceTransaction:
    return BalanceTransaction(
        id=row["id"],
        user_id=row["user_id"],
        amount_cents=row["amount_cents"],
        transaction_type=TransactionType(row["transaction_type"]),
        balance_after_cents=row["balance_after_cents"],
        description=row["description"],
        queue_item_id=row["queue_item_id"],
        created_at=UtcDateTime.from_iso(row["created_at"]).dt,
    )


class SQLiteLedgerRepository(LedgerRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_user(
        self, display_name: str, initial_balance_cents: int, description: str
    ) -> User:
        created_at = utcnow()
        async with self._db.transaction() as conn:
            cursor = await conn.execute(
                "INSERT INTO users (display_name, balance_cents, created_at) VALUES (?, 0, ?)",
                (display_name, UtcDateTime(created_at).iso),
            )
            user_id = cursor.lastrowid
            if initial_balance_cents > 0:
                await apply_credit(
                    conn,
                    user_id=user_id,
                    amount_cents=initial_balance_cents,
                    transaction_type=TransactionType.INITIAL,
                    description=description,
                )

        logger.info(LogTemplates.LEDGER_USER_CREATED, user_id, initial_balance_cents)
        return User(
            id=user_id,
            display_name=display_name,
            balance_cents=max(initial_balance_cents, 0),
            created_at=created_at,
        )

    async def get_user(self, user_id: int) -> User | None:
        row = await self._db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        if row is None:
            return None
        return User(
            id=row["id"],
            display_name=row["display_name"],
            balance_cents=row["balance_cents"],
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
        )

    async def debit(
        self,
        user_id: int,
        amount_cents: int,
        description: str,
        queue_item_id: int | None = None,
    ) -> BalanceTransaction:
        async with self._db.transaction() as conn:
            return await apply_debit(
                conn,
                user_id=user_id,
                amount_cents=amount_cents,
                description=description,
                queue_item_id=queue_item_id,
            )

    async def credit(
        self,
        user_id: int,
        amount_cents: int,
        transaction_type: TransactionType,
        description: str,
        queue_item_id: int | None = None,
    ) -> BalanceTransaction:
        async with self._db.transaction() as conn:
            return await apply_credit(
                conn,
                user_id=user_id,
                amount_cents=amount_cents,
                transaction_type=transaction_type,
                description=description,
                queue_item_id=queue_item_id,
            )

    async def list_transactions(self, user_id: int) -> list[BalanceTransaction]:
        rows = await self._db.fetch_all(
            "SELECT * FROM balance_transactions WHERE user_id = ? ORDER BY id ASC",
            (user_id,),
        )
        return [row_to_transaction(row) for row in rows]
