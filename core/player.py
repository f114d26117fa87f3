"""Player identity, wallet and bet placement."""

from typing import Any

from core.errors import InsufficientFundsError, InvalidBetError
from core.hand import Hand


def validate_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidBetError(f"Amount must be an integer, got {amount!r}")
    if amount <= 0:
        raise InvalidBetError(f"Amount must be positive, got {amount}")
    return amount


class Player:
    """
    The single player at the table.

    The wallet can only change through ``place_bet`` (debit) and
    ``win_money`` (credit for payouts and push refunds).
    """

    def __init__(self, wallet: int = 100, player_id: str | None = None) -> None:
        if wallet < 0:
            raise ValueError("Wallet cannot be negative")
        self._wallet = wallet
        self._id = player_id
        self.hand = Hand()

    @property
    def id(self) -> str | None:
        return self._id

    def assign_id(self, player_id: str) -> None:
        """Assign the identity returned by the wallet store. Only once."""
        if self._id is not None and self._id != player_id:
            raise ValueError(f"Player already has id {self._id}")
        self._id = player_id

    @property
    def wallet(self) -> int:
        return self._wallet

    def can_afford(self, amount: int) -> bool:
        return amount <= self._wallet

    def place_bet(self, amount: int) -> None:
        """
        Debit a confirmed bet from the wallet.

        Raises:
            InvalidBetError: amount is not a positive integer
            InsufficientFundsError: wallet balance is below amount
        """
        validate_amount(amount)
        if not self.can_afford(amount):
            raise InsufficientFundsError(required=amount, available=self._wallet)
        self._wallet -= amount

    def win_money(self, amount: int) -> None:
        """Credit a payout or refund to the wallet."""
        validate_amount(amount)
        self._wallet += amount

    def to_dict(self) -> dict[str, Any]:
        return {"id": self._id, "wallet": self._wallet, "hand": self.hand.to_dict()}

    def __repr__(self) -> str:
        return f"Player(id={self._id!r}, wallet={self._wallet})"
