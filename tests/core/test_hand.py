"""Tests for Hand evaluation."""

import pytest
from hypothesis import given, strategies as st

from core.cards import Card, Rank, Suit
from core.hand import Hand, Outcome, determine_outcome, is_bust, total_value


cards_strategy = st.builds(Card, st.sampled_from(list(Rank)), st.sampled_from(list(Suit)))


class TestHandValue:
    """Tests for hand totals and bust detection."""

    def test_empty_hand(self, empty_hand):
        assert len(empty_hand) == 0
        assert empty_hand.value == 0
        assert not empty_hand.is_soft
        assert not empty_hand.is_busted

    def test_add_card(self, empty_hand):
        empty_hand.add_card(Card(Rank.TEN, Suit.SPADES))
        assert len(empty_hand) == 1
        assert empty_hand.value == 10

    def test_hard_hand_value(self, hard_16_hand):
        assert hard_16_hand.value == 16
        assert not hard_16_hand.is_soft

    def test_soft_hand_value(self, soft_17_hand):
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_ace_demoted_instead_of_busting(self, hand_of):
        """{Ace, 6, 5} is 12, not 22."""
        hand = hand_of("AS", "6H", "5C")
        assert hand.value == 12
        assert not hand.is_busted
        assert not hand.is_soft

    def test_two_card_21_with_ace(self, hand_of):
        hand = hand_of("AS", "KH")
        assert hand.value == 21
        assert not hand.is_busted

    def test_bust(self, bust_hand):
        assert bust_hand.is_busted
        assert bust_hand.value == 25

    def test_multiple_aces(self, hand_of):
        assert hand_of("AS", "AH").value == 12
        assert hand_of("AS", "AH", "AC").value == 13
        assert hand_of("AS", "AH", "AC", "9D").value == 12
        assert hand_of("AS", "AH", "AC", "AD", "KS", "KH").value == 24

    def test_soft_to_hard_transition(self, empty_hand):
        empty_hand.add_card(Card(Rank.ACE, Suit.SPADES))
        assert empty_hand.value == 11
        assert empty_hand.is_soft

        empty_hand.add_card(Card(Rank.FIVE, Suit.HEARTS))
        assert empty_hand.value == 16
        assert empty_hand.is_soft

        empty_hand.add_card(Card(Rank.EIGHT, Suit.CLUBS))
        assert empty_hand.value == 14
        assert not empty_hand.is_soft

    def test_order_does_not_matter(self, hand_of):
        assert hand_of("AS", "9H", "5C").value == hand_of("5C", "AS", "9H").value

    def test_str(self, hand_of):
        assert str(hand_of("AS", "6H")) == "A♠ 6♥ (soft 17)"
        assert str(hand_of("10S", "10H", "5C")).endswith("(BUST)")

    def test_to_dict(self, hand_of):
        data = hand_of("KS", "7D").to_dict()
        assert data["value"] == 17
        assert data["is_busted"] is False
        assert [c["rank"] for c in data["cards"]] == ["K", "7"]

    @given(st.lists(cards_strategy, min_size=1, max_size=8))
    def test_total_is_maximal_legal_total(self, cards):
        """With aces counted as 1 or 11, the total is the best non-bust one."""
        aces = sum(1 for c in cards if c.is_ace)
        hard = sum(1 if c.is_ace else c.value for c in cards)
        candidates = [hard + 10 * k for k in range(aces + 1)]
        legal = [t for t in candidates if t <= 21]
        expected = max(legal) if legal else hard

        assert total_value(cards) == expected
        assert is_bust(cards) == (expected > 21)

    @given(st.lists(cards_strategy, min_size=2, max_size=8))
    def test_bust_only_when_all_aces_are_low(self, cards):
        hard = sum(1 if c.is_ace else c.value for c in cards)
        assert is_bust(cards) == (hard > 21)


class TestDetermineOutcome:
    """Tests for win/lose/push resolution."""

    def test_higher_player_total_wins(self, hand_of):
        assert determine_outcome(hand_of("10S", "KH"), hand_of("10C", "9D")) is Outcome.PLAYER_WINS

    def test_higher_dealer_total_wins(self, hand_of):
        assert determine_outcome(hand_of("10S", "7H"), hand_of("10C", "9D")) is Outcome.HOUSE_WINS

    def test_equal_totals_push(self, hand_of):
        assert determine_outcome(hand_of("10S", "8H"), hand_of("9C", "9D")) is Outcome.PUSH

    def test_player_bust_loses_regardless_of_dealer(self, hand_of):
        player = hand_of("10S", "10H", "5C")
        assert determine_outcome(player, hand_of("10C", "8D")) is Outcome.HOUSE_WINS
        assert determine_outcome(player, hand_of("10C", "6D", "KD")) is Outcome.HOUSE_WINS

    def test_dealer_bust_player_wins(self, hand_of):
        assert determine_outcome(hand_of("10S", "2H"), hand_of("10C", "6D", "9S")) is Outcome.PLAYER_WINS

    @pytest.mark.parametrize(
        "outcome,label",
        [
            (Outcome.PLAYER_WINS, "Player wins"),
            (Outcome.HOUSE_WINS, "House wins"),
            (Outcome.PUSH, "Push"),
        ],
    )
    def test_outcome_labels(self, outcome, label):
        assert str(outcome) == label


class TestHandMutation:
    def test_cards_kept_in_deal_order(self):
        hand = Hand()
        first, second = Card(Rank.KING, Suit.SPADES), Card(Rank.TWO, Suit.CLUBS)
        hand.add_card(first)
        hand.add_card(second)
        assert list(hand) == [first, second]
