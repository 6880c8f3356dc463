"""
Ledger Repository Interface

Abstract base class defining the persistence contract for users and their
balance transactions. Implementations live in the infrastructure layer and
must apply each balance change and its ledger row in one atomic unit.
"""

from abc import ABC, abstractmethod

from jukebox_queue.domain.ledger.entities import BalanceTransaction, TransactionType, User


class LedgerRepository(ABC):
    """Abstract repository for wallets and the append-only ledger."""

    @abstractmethod
    async def create_user(
        self, display_name: str, initial_balance_cents: int, description: str
    ) -> User:
        """Create a user and record the opening credit.

        Args:
            display_name: Name shown next to the user's requests.
            initial_balance_cents: Opening balance; recorded as an ``initial`` entry
                when positive.
            description: Description of the opening entry.

        Returns:
            The stored user.
        """
        ...

    @abstractmethod
    async def get_user(self, user_id: int) -> User | None:
        """Retrieve a user by id.

        Args:
            user_id: The user id.

        Returns:
            The user if found, None otherwise.
        """
        ...

    @abstractmethod
    async def debit(
        self,
        user_id: int,
        amount_cents: int,
        description: str,
        queue_item_id: int | None = None,
    ) -> BalanceTransaction:
        """Decrement a balance and append a ``debit`` entry.

        Concurrent debits against the same user must never overdraw it.

        Args:
            user_id: The paying user.
            amount_cents: Positive amount to take.
            description: Ledger description.
            queue_item_id: Optional item the payment is for.

        Returns:
            The appended ledger entry.

        Raises:
            InsufficientBalanceError: If the balance is below ``amount_cents``.
            UserNotFoundError: If the user does not exist.
        """
        ...

    @abstractmethod
    async def credit(
        self,
        user_id: int,
        amount_cents: int,
        transaction_type: TransactionType,
        description: str,
        queue_item_id: int | None = None,
    ) -> BalanceTransaction:
        """Increment a balance and append a ``refund`` or ``initial`` entry.

        Args:
            user_id: The credited user.
            amount_cents: Positive amount to add.
            transaction_type: ``REFUND`` or ``INITIAL``.
            description: Ledger description.
            queue_item_id: Optional item the credit relates to.

        Returns:
            The appended ledger entry.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        ...

    @abstractmethod
    async def list_transactions(self, user_id: int) -> list[BalanceTransaction]:
        """List a user's ledger entries in insertion order.

        Args:
            user_id: The user id.

        Returns:
            All entries, oldest first.
        """
        ...
