"""
Data-driven gesture grammar.

A grammar is an ordered list of (conditions -> symbol) rules plus a
symbol -> display text table. Rules are evaluated top to bottom and the
first match wins, so the order of the list is part of the vocabulary:
new symbols must be inserted without moving existing ones past each other.

Grammars are plain dicts (or YAML files with the same shape):

    name: signs
    hold_frames: 10
    two_hand:
      - symbol: nice_to_meet
        fingers: ["1000", "1000"]
        checks: [{name: tips_close, max_distance: 0.12}]
    one_hand:
      - {symbol: okay, fingers: "1100"}
      - {symbol: fist, fingers: "0000"}
    text:
      okay: "OKAY!"

`fingers` is a pattern over index/middle/ring/pinky using 1 (extended),
0 (curled) or x (either). `thumb` optionally requires the thumb to be
extended (true) or tucked (false). `checks` name predicates from
gestures.predicates with their keyword parameters.
"""
import inspect
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .predicates import HandView, ONE_HAND_PREDICATES, TWO_HAND_PREDICATES


NONE = "none"
FIST = "fist"


class GrammarError(ValueError):
    """Raised when a grammar definition is malformed."""


@dataclass
class Check:
    """A named predicate with bound parameters."""
    name: str
    params: Dict[str, Any] = field(default_factory=dict)
    two_hand: bool = False

    def __post_init__(self):
        registry = TWO_HAND_PREDICATES if self.two_hand else ONE_HAND_PREDICATES
        if self.name not in registry:
            raise GrammarError(f"Unknown predicate: {self.name}")
        self._func = registry[self.name]
        args = (None, None) if self.two_hand else (None,)
        try:
            inspect.signature(self._func).bind(*args, **self.params)
        except TypeError as e:
            raise GrammarError(f"Bad parameters for {self.name}: {e}") from e

        for param, allowed in self._func.choices.items():
            if param in self.params and not _is_choice(self.params[param], allowed):
                raise GrammarError(
                    f"Bad value for {self.name}.{param}: {self.params[param]!r}"
                )

    def __call__(self, *hands: HandView) -> bool:
        return self._func(*hands, **self.params)


@dataclass
class GestureRule:
    """Single-hand rule."""
    symbol: str
    fingers: Optional[str] = None
    thumb: Optional[bool] = None
    checks: List[Check] = field(default_factory=list)

    def matches(self, hand: HandView) -> bool:
        if self.fingers is not None and not hand.matches_pattern(self.fingers):
            return False
        if self.thumb is not None and hand.thumb_extended != self.thumb:
            return False
        return all(check(hand) for check in self.checks)


@dataclass
class TwoHandRule:
    """Rule over the first two detected hands."""
    symbol: str
    fingers: Optional[Tuple[str, str]] = None
    checks: List[Check] = field(default_factory=list)

    def matches(self, first: HandView, second: HandView) -> bool:
        if self.fingers is not None:
            if not (first.matches_pattern(self.fingers[0])
                    and second.matches_pattern(self.fingers[1])):
                return False
        return all(check(first, second) for check in self.checks)


@dataclass
class GestureGrammar:
    """Ordered rules plus the display text for each symbol."""
    name: str
    one_hand: List[GestureRule]
    two_hand: List[TwoHandRule] = field(default_factory=list)
    texts: Dict[str, str] = field(default_factory=dict)
    hold_frames: int = 10
    spelling: bool = False
    letter_confirm_frames: int = 15

    @property
    def symbols(self) -> List[str]:
        """Every symbol the grammar can produce, in priority order."""
        seen = [r.symbol for r in self.two_hand] + [r.symbol for r in self.one_hand]
        ordered = []
        for symbol in seen + [NONE]:
            if symbol not in ordered:
                ordered.append(symbol)
        return ordered

    def display_text(self, symbol: str) -> Optional[str]:
        if symbol in (NONE, FIST):
            return None
        return self.texts.get(symbol)

    def is_letter(self, symbol: str) -> bool:
        """In spelling grammars every symbol with display text is a letter."""
        return self.spelling and self.display_text(symbol) is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GestureGrammar":
        if not isinstance(data, dict):
            raise GrammarError("Grammar must be a mapping")

        one_hand = [_parse_rule(entry) for entry in data.get('one_hand') or []]
        two_hand = [_parse_two_hand_rule(entry) for entry in data.get('two_hand') or []]
        if not one_hand and not two_hand:
            raise GrammarError("Grammar has no rules")

        hold_frames = int(data.get('hold_frames', 10))
        letter_confirm_frames = int(data.get('letter_confirm_frames', 15))
        if hold_frames < 1 or letter_confirm_frames < 1:
            raise GrammarError("Frame thresholds must be positive")

        return cls(
            name=str(data.get('name', 'custom')),
            one_hand=one_hand,
            two_hand=two_hand,
            texts={str(k): str(v) for k, v in (data.get('text') or {}).items()},
            hold_frames=hold_frames,
            spelling=bool(data.get('spelling', False)),
            letter_confirm_frames=letter_confirm_frames,
        )


def _is_choice(value: Any, allowed) -> bool:
    try:
        return value in allowed
    except TypeError:
        # Unhashable values (lists, mappings) are never valid choices
        return False


def _parse_pattern(pattern: Any) -> str:
    pattern = str(pattern)
    if len(pattern) != 4 or any(c not in '01x' for c in pattern):
        raise GrammarError(f"Bad finger pattern: {pattern!r}")
    return pattern


def _parse_checks(entries: Any, two_hand: bool) -> List[Check]:
    checks = []
    for entry in entries or []:
        if isinstance(entry, str):
            checks.append(Check(entry, two_hand=two_hand))
        elif isinstance(entry, dict) and 'name' in entry:
            params = {k: v for k, v in entry.items() if k != 'name'}
            checks.append(Check(entry['name'], params, two_hand=two_hand))
        else:
            raise GrammarError(f"Bad check: {entry!r}")
    return checks


def _parse_rule(entry: Dict[str, Any]) -> GestureRule:
    if not isinstance(entry, dict) or not entry.get('symbol'):
        raise GrammarError(f"Rule needs a symbol: {entry!r}")
    fingers = entry.get('fingers')
    thumb = entry.get('thumb')
    if thumb is not None and not isinstance(thumb, bool):
        raise GrammarError(f"thumb must be true or false: {thumb!r}")
    return GestureRule(
        symbol=str(entry['symbol']),
        fingers=_parse_pattern(fingers) if fingers is not None else None,
        thumb=thumb,
        checks=_parse_checks(entry.get('checks'), two_hand=False),
    )


def _parse_two_hand_rule(entry: Dict[str, Any]) -> TwoHandRule:
    if not isinstance(entry, dict) or not entry.get('symbol'):
        raise GrammarError(f"Rule needs a symbol: {entry!r}")
    fingers = entry.get('fingers')
    if fingers is not None:
        if len(fingers) != 2:
            raise GrammarError("Two-hand rules need one pattern per hand")
        fingers = (_parse_pattern(fingers[0]), _parse_pattern(fingers[1]))
    return TwoHandRule(
        symbol=str(entry['symbol']),
        fingers=fingers,
        checks=_parse_checks(entry.get('checks'), two_hand=True),
    )


# ---------------------------------------------------------------------------
# Built-in vocabularies
# ---------------------------------------------------------------------------

SIGNS: Dict[str, Any] = {
    'name': 'signs',
    'hold_frames': 10,
    'two_hand': [
        # Two upright index fingers brought together
        {'symbol': 'nice_to_meet', 'fingers': ['1000', '1000'],
         'checks': [{'name': 'tips_close', 'max_distance': 0.12}]},
    ],
    'one_hand': [
        {'symbol': 'what_do_u_want', 'checks': [{'name': 'all_tips_pinched', 'max_distance': 0.07}]},
        {'symbol': 'fuck_u', 'fingers': '0100'},
        {'symbol': 'i_love_you', 'fingers': '1001', 'thumb': True},
        {'symbol': 'okay', 'fingers': '1100'},
        {'symbol': 'u_suck', 'fingers': '1000', 'thumb': True,
         'checks': [{'name': 'thumb_lateral', 'min_offset': 0.08}]},
        {'symbol': 'hello', 'fingers': '1000'},
        {'symbol': 'thank_you', 'fingers': '0001'},
        {'symbol': 'goodbye', 'fingers': '1111',
         'checks': [{'name': 'oscillating', 'frames': 12, 'min_changes': 3}]},
        {'symbol': 'nadim', 'fingers': '1111'},
        {'symbol': FIST, 'fingers': '0000'},
    ],
    'text': {
        'hello': 'HELLO',
        'nadim': 'THIS IS NADIM',
        'nice_to_meet': 'NICE TO MEET YOU',
        'i_love_you': 'I LOVE YOU',
        'thank_you': 'THANK YOU',
        'what_do_u_want': 'WHAT DO YOU WANT?',
        'okay': 'OKAY!',
        'fuck_u': 'FUCK U',
        'u_suck': 'U SUCK',
        'goodbye': 'GOODBYE',
    },
}

LETTERS: Dict[str, Any] = {
    'name': 'letters',
    'hold_frames': 8,
    'spelling': True,
    'letter_confirm_frames': 15,
    'one_hand': [
        # Motion letters first: their static shapes overlap D/G and I
        {'symbol': 'Z', 'fingers': '1000', 'checks': ['z_stroke']},
        {'symbol': 'J', 'fingers': '0001',
         'checks': [{'name': 'moving', 'frames': 10, 'min_distance': 0.06}]},
        {'symbol': 'O', 'checks': [{'name': 'all_tips_pinched', 'max_distance': 0.07}]},
        {'symbol': 'F', 'fingers': 'x111',
         'checks': [{'name': 'pinch', 'finger': 'index', 'max_distance': 0.05}]},
        # Index-only family: most specific geometry before the plain shape
        {'symbol': 'Q', 'fingers': '1000', 'checks': [{'name': 'pointing_down', 'margin': 0.05}]},
        {'symbol': 'D', 'fingers': '1000',
         'checks': [{'name': 'pinch', 'finger': 'middle', 'max_distance': 0.06}]},
        {'symbol': 'L', 'fingers': '1000', 'thumb': True,
         'checks': [{'name': 'thumb_lateral', 'min_offset': 0.08}]},
        {'symbol': 'G', 'fingers': '1000', 'checks': ['horizontal']},
        {'symbol': 'A', 'fingers': '0000', 'thumb': True, 'checks': ['thumb_raised']},
        {'symbol': 'Y', 'fingers': '0001', 'thumb': True},
        {'symbol': 'I', 'fingers': '0001'},
        # Index + middle family: inter-tip distance, then orientation, then default
        {'symbol': 'V', 'fingers': '1100',
         'checks': [{'name': 'tips_apart', 'first': 'index', 'second': 'middle', 'min_distance': 0.06}]},
        {'symbol': 'H', 'fingers': '1100', 'checks': ['horizontal']},
        {'symbol': 'U', 'fingers': '1100'},
        {'symbol': 'W', 'fingers': '1110'},
        {'symbol': 'B', 'fingers': '1111', 'thumb': False},
        {'symbol': FIST, 'fingers': '0000'},
    ],
    'text': {letter: letter for letter in 'ABDFGHIJLOQUVWYZ'},
}

BUILTIN_GRAMMARS: Dict[str, Dict[str, Any]] = {
    'signs': SIGNS,
    'letters': LETTERS,
}


def load_grammar(path: Union[str, Path]) -> GestureGrammar:
    """Load a grammar from a YAML file."""
    path = Path(path)
    with open(path, 'r') as f:
        data = yaml.safe_load(f)
    if data is None:
        raise GrammarError(f"Empty grammar file: {path}")
    data.setdefault('name', path.stem)
    return GestureGrammar.from_dict(data)


def get_grammar(mode: str = 'signs', grammar_file: Optional[Union[str, Path]] = None) -> GestureGrammar:
    """
    Resolve the grammar for a session.

    Args:
        mode: Name of a built-in grammar ('signs' or 'letters')
        grammar_file: Optional YAML grammar that replaces the built-in one

    Returns:
        Parsed GestureGrammar.
    """
    if grammar_file is not None:
        return load_grammar(grammar_file)
    if mode not in BUILTIN_GRAMMARS:
        raise GrammarError(f"Unknown gesture mode: {mode}")
    return GestureGrammar.from_dict(BUILTIN_GRAMMARS[mode])
