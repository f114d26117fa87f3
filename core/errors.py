"""Error taxonomy for the blackjack engine."""


class BlackjackError(Exception):
    """Base class for all engine errors."""


class EmptyDeckError(BlackjackError, IndexError):
    """Raised when drawing from a deck with no cards remaining."""


class InsufficientFundsError(BlackjackError):
    """Raised when a bet exceeds the player's wallet."""

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Not enough money: need {required}, have {available}")


class InvalidBetError(BlackjackError, ValueError):
    """Raised for non-positive or otherwise malformed bet amounts."""


class OutOfStateCommand(BlackjackError):
    """A command arrived that is not valid in the current game state."""

    def __init__(self, command: str, state: str) -> None:
        self.command = command
        self.state = state
        super().__init__(f"Cannot {command} while {state}")


class SupplierUnavailable(BlackjackError):
    """The deck supplier or wallet store failed to respond."""
