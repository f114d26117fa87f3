"""Game state enumeration."""

from enum import Enum, auto


class GameState(Enum):
    """
    Round state machine states.

    Flow: AWAITING_BET → AWAITING_DECK → OPENING_DEAL → PLAYER_TURN → DEALER_TURN → RESOLVED
    """

    # Player accumulates and confirms a bet
    AWAITING_BET = auto()

    # Bet confirmed, deck fetch outstanding
    AWAITING_DECK = auto()

    # Deck shuffled, four cards going out
    OPENING_DEAL = auto()

    PLAYER_TURN = auto()

    DEALER_TURN = auto()

    # Outcome decided and paid out
    RESOLVED = auto()

    # Wallet below the minimum playable amount
    SESSION_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[GameState, list[GameState]] = {
    GameState.AWAITING_BET: [GameState.AWAITING_DECK],
    GameState.AWAITING_DECK: [GameState.OPENING_DEAL],
    GameState.OPENING_DEAL: [GameState.PLAYER_TURN],
    GameState.PLAYER_TURN: [GameState.DEALER_TURN, GameState.RESOLVED],
    GameState.DEALER_TURN: [GameState.RESOLVED, GameState.AWAITING_BET],  # AWAITING_BET if the deck runs out
    GameState.RESOLVED: [GameState.AWAITING_BET, GameState.SESSION_OVER],
    GameState.SESSION_OVER: [],  # Terminal state
}


def is_valid_transition(from_state: GameState, to_state: GameState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
