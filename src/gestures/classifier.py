"""
Gesture classification from hand landmarks.
Maps the hands of one frame to a single grammar symbol.
"""
from typing import Optional, Sequence

from .grammar import GestureGrammar, NONE
from .history import LandmarkHistory
from .landmarks import HandLandmarks
from .predicates import HandView


class GestureClassifier:
    """
    Stateless classifier driven by a GestureGrammar.

    Two-hand rules are tried first when at least two hands are visible;
    single-hand rules then run on hand 0. The first matching rule wins.
    Temporal information only enters through the LandmarkHistory passed in.
    """

    def __init__(self, grammar: GestureGrammar):
        self._grammar = grammar

    @property
    def grammar(self) -> GestureGrammar:
        return self._grammar

    def classify(
        self,
        hands: Sequence[HandLandmarks],
        history: Optional[LandmarkHistory] = None,
    ) -> str:
        """
        Classify one frame.

        Args:
            hands: Zero or more detected hands, in detector order
            history: Motion history per hand slot (required by motion rules)

        Returns:
            The matched symbol, or 'none'.
        """
        if not hands:
            return NONE

        views = [
            HandView(lm, history[i] if history is not None and i < len(history) else None)
            for i, lm in enumerate(hands[:2])
        ]

        if len(views) >= 2:
            for rule in self._grammar.two_hand:
                if rule.matches(views[0], views[1]):
                    return rule.symbol

        for rule in self._grammar.one_hand:
            if rule.matches(views[0]):
                return rule.symbol

        return NONE
