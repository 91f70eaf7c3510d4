"""
Temporal debouncing of per-frame gesture labels.

Raw labels flicker whenever the classifier sits near a threshold. The
debouncer only commits a new stable gesture after the same raw label has
been seen for `hold_frames` consecutive frames, and in spelling grammars
appends a letter to the spelled buffer after it has stayed stable for
`letter_confirm_frames` more.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .grammar import GestureGrammar, NONE, FIST


@dataclass
class DebounceState:
    """Mutable debounce state, updated once per frame."""
    current_stable: str = NONE
    pending: str = NONE
    hold_count: int = 0
    confirmed_buffer: List[str] = field(default_factory=list)
    letter_hold: int = 0
    last_confirmed: Optional[str] = None


@dataclass
class DebounceResult:
    """Outcome of one update."""
    stable: str
    changed: bool = False
    appended: Optional[str] = None
    cleared: bool = False


class GestureDebouncer:
    """
    Hysteresis filter turning raw labels into a stable gesture.

    - A differing raw label starts a pending candidate with count 1; the
      candidate is confirmed when its count reaches hold_frames.
    - Any other label mid-count restarts the candidate.
    - A raw label equal to the stable one cancels the candidate.
    - Spelling: a stable letter held for letter_confirm_frames is appended
      once. The same letter is not appended again until a raw 'none' has
      been observed. A confirmed 'fist' atomically clears the buffer.
    """

    def __init__(
        self,
        hold_frames: int = 10,
        spelling: bool = False,
        letter_confirm_frames: int = 15,
        is_letter: Optional[Callable[[str], bool]] = None,
    ):
        if hold_frames < 1 or letter_confirm_frames < 1:
            raise ValueError("Frame thresholds must be positive")
        self.hold_frames = hold_frames
        self.spelling = spelling
        self.letter_confirm_frames = letter_confirm_frames
        self._is_letter = is_letter or (lambda symbol: symbol not in (NONE, FIST))
        self._state = DebounceState()

    @classmethod
    def for_grammar(
        cls,
        grammar: GestureGrammar,
        hold_frames: Optional[int] = None,
        letter_confirm_frames: Optional[int] = None,
    ) -> "GestureDebouncer":
        """Build a debouncer using the grammar's thresholds unless overridden."""
        return cls(
            hold_frames=grammar.hold_frames if hold_frames is None else hold_frames,
            spelling=grammar.spelling,
            letter_confirm_frames=(grammar.letter_confirm_frames if letter_confirm_frames is None
                                   else letter_confirm_frames),
            is_letter=grammar.is_letter,
        )

    @property
    def state(self) -> DebounceState:
        return self._state

    @property
    def stable(self) -> str:
        return self._state.current_stable

    @property
    def buffer(self) -> str:
        """The spelled letters so far."""
        return "".join(self._state.confirmed_buffer)

    def update(self, raw: str) -> DebounceResult:
        """Feed one frame's raw label."""
        s = self._state
        result = DebounceResult(stable=s.current_stable)

        if raw == NONE:
            s.last_confirmed = None

        if raw != s.current_stable:
            if raw == s.pending:
                s.hold_count += 1
            else:
                s.pending = raw
                s.hold_count = 1

            if s.hold_count >= self.hold_frames:
                s.current_stable = raw
                s.hold_count = 0
                s.letter_hold = 0
                result.stable = raw
                result.changed = True

                if self.spelling and raw == FIST:
                    s.confirmed_buffer = []
                    s.last_confirmed = None
                    result.cleared = True
        else:
            s.pending = raw
            s.hold_count = 0

        if self.spelling and self._is_letter(s.current_stable):
            s.letter_hold += 1
            if (s.letter_hold == self.letter_confirm_frames
                    and s.current_stable != s.last_confirmed):
                s.confirmed_buffer.append(s.current_stable)
                s.last_confirmed = s.current_stable
                result.appended = s.current_stable

        return result

    def reset(self, clear_buffer: bool = False) -> None:
        """Return to the idle state. The spelled buffer survives unless asked."""
        buffer = [] if clear_buffer else self._state.confirmed_buffer
        self._state = DebounceState(confirmed_buffer=buffer)
