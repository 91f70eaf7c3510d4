"""
Galaxy Hands Gestures Module

Geometric gesture classification, motion history and debouncing.
"""
from .landmarks import HandLandmarks
from .history import LandmarkHistory, HandHistory, FeatureSnapshot
from .grammar import (
    GestureGrammar,
    GrammarError,
    get_grammar,
    load_grammar,
    NONE,
    FIST,
)
from .classifier import GestureClassifier
from .debouncer import GestureDebouncer, DebounceState, DebounceResult

__all__ = [
    'HandLandmarks',
    'LandmarkHistory',
    'HandHistory',
    'FeatureSnapshot',
    'GestureGrammar',
    'GrammarError',
    'get_grammar',
    'load_grammar',
    'NONE',
    'FIST',
    'GestureClassifier',
    'GestureDebouncer',
    'DebounceState',
    'DebounceResult',
]
