"""
Session orchestrator.

Wires classifier output into the debouncer, and debouncer transitions into
the particle field. Detector deliveries (on_hands) and draw ticks (tick /
draw) arrive independently; every entry point takes the same lock so the
shared state is never seen half-updated.
"""
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from gestures.classifier import GestureClassifier
from gestures.debouncer import GestureDebouncer
from gestures.grammar import GestureGrammar, get_grammar, NONE, FIST
from gestures.history import LandmarkHistory
from gestures.landmarks import HandLandmarks
from particles.backend import DrawingBackend
from particles.field import ParticleField
from particles.text_raster import TextRaster

from .config import Config


NO_HAND_STATUS = "Show your hand to the camera"
LOADING_STATUS = "Loading hand tracking model..."
FIST_LABEL = "Fist detected"
TRACKING_LABEL = "Tracking hand..."

StatusCallback = Callable[[str], None]


def _ignore(_: str) -> None:
    pass


@dataclass
class SessionContext:
    """Per-session state shared between detection and drawing."""
    raw_gesture: str = NONE
    hands_visible: int = 0
    fist_position: Optional[Tuple[float, float]] = None
    text: str = ""
    text_mode: bool = False

    def reset(self) -> None:
        self.raw_gesture = NONE
        self.hands_visible = 0
        self.fist_position = None
        self.text = ""
        self.text_mode = False


class Orchestrator:
    """
    Drives one classify -> debounce -> simulate -> draw cycle per frame.

    on_hands() is called whenever the detector delivers a batch (possibly
    empty); tick() and draw() are called once per displayed frame and reuse
    the last raw gesture when no new detection arrived in between.
    """

    def __init__(
        self,
        config: Config,
        width: int,
        height: int,
        grammar: Optional[GestureGrammar] = None,
        rng: Optional[random.Random] = None,
        on_status: Optional[StatusCallback] = None,
        on_gesture: Optional[StatusCallback] = None,
        on_spelling: Optional[StatusCallback] = None,
    ):
        g = config.gestures
        self._grammar = grammar or get_grammar(g.mode, g.grammar_file)
        self._classifier = GestureClassifier(self._grammar)
        self._debouncer = GestureDebouncer.for_grammar(
            self._grammar, g.hold_frames, g.letter_confirm_frames
        )
        self._history = LandmarkHistory(slots=2, capacity=g.history_size)
        self._raster = TextRaster(config.text)
        self._field = ParticleField(config.particles, width, height, rng)
        self._context = SessionContext()

        # Landmarks of an unmirrored camera are flipped for display
        self._flip_x = not config.camera.mirror

        self._on_status = on_status or _ignore
        self._on_gesture = on_gesture or _ignore
        self._on_spelling = on_spelling or _ignore
        self._last_label: Optional[str] = None

        self._lock = threading.RLock()
        self._stopped = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def field(self) -> ParticleField:
        return self._field

    @property
    def grammar(self) -> GestureGrammar:
        return self._grammar

    @property
    def debouncer(self) -> GestureDebouncer:
        return self._debouncer

    @property
    def history(self) -> LandmarkHistory:
        return self._history

    @property
    def spelled(self) -> str:
        return self._debouncer.buffer

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    # ------------------------------------------------------------------
    # Detector side
    # ------------------------------------------------------------------

    def on_hands(self, hands: Sequence[HandLandmarks]) -> str:
        """
        Consume one detector batch.

        Args:
            hands: Detected hands (empty when no hand is visible)

        Returns:
            The raw gesture for this batch.
        """
        with self._lock:
            if self._stopped:
                return self._context.raw_gesture

            hands = list(hands)[:len(self._history)]
            ctx = self._context
            ctx.hands_visible = len(hands)

            if not hands:
                self._hand_lost()
                return NONE

            self._history.retain(len(hands))
            for slot, landmarks in enumerate(hands):
                self._history.push(slot, landmarks)

            gesture = self._classifier.classify(hands, self._history)
            ctx.raw_gesture = gesture

            if gesture == FIST:
                px, py = hands[0].palm[0], hands[0].palm[1]
                if self._flip_x:
                    px = 1.0 - px
                ctx.fist_position = (px * self._field.width, py * self._field.height)
            else:
                ctx.fist_position = None
            self._field.set_repulsion_source(ctx.fist_position)

            self._publish(self._label_for(gesture), "")
            return gesture

    def _hand_lost(self) -> None:
        ctx = self._context
        ctx.raw_gesture = NONE
        ctx.fist_position = None
        self._field.set_repulsion_source(None)
        self._history.clear()
        self._publish("", NO_HAND_STATUS)

    def _label_for(self, gesture: str) -> str:
        text = self._grammar.display_text(gesture)
        if text is not None:
            return text
        if gesture == FIST:
            return FIST_LABEL
        return TRACKING_LABEL

    def _publish(self, label: str, status: str) -> None:
        if label != self._last_label:
            self._last_label = label
            self._on_gesture(label)
            self._on_status(status)

    # ------------------------------------------------------------------
    # Frame side
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Debounce the latest raw gesture and advance the simulation."""
        with self._lock:
            if self._stopped:
                return

            result = self._debouncer.update(self._context.raw_gesture)
            if result.changed:
                self._apply_transition(result.stable)
            if result.cleared:
                print("Action: Spelling cleared")
                self._on_spelling("")
            if result.appended is not None:
                spelled = self._debouncer.buffer
                print(f"Action: Spelled '{result.appended}' -> {spelled}")
                self._on_spelling(spelled)
                self._materialize(spelled)

            self._field.tick()

    def _apply_transition(self, stable: str) -> None:
        text = self._grammar.display_text(stable)
        if text is not None:
            if text != self._context.text or not self._context.text_mode:
                self._materialize(text)
        else:
            self._release()

    def _materialize(self, text: str) -> None:
        ctx = self._context
        ctx.text = text
        ctx.text_mode = True
        count = self._field.assign_text(text, self._raster)
        self._field.set_text_mode(True)
        print(f"Action: Materialize '{text}' ({count} particles)")

    def _release(self) -> None:
        if self._context.text_mode:
            print(f"Action: Scatter '{self._context.text}'")
        self._context.text_mode = False
        self._field.set_text_mode(False)

    def draw(self, backend: DrawingBackend, now: Optional[float] = None) -> None:
        with self._lock:
            self._field.draw(backend, time.time() if now is None else now)

    def resize(self, width: int, height: int) -> None:
        """React to a viewport change; active text is re-sampled at the new size."""
        with self._lock:
            self._field.resize(width, height)
            if self._context.text_mode and self._context.text:
                self._field.assign_text(self._context.text, self._raster)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget the current gesture state. The spelled buffer is kept."""
        with self._lock:
            self._context.reset()
            self._debouncer.reset()
            self._history.clear()
            self._field.set_repulsion_source(None)
            self._field.set_text_mode(False)
            self._last_label = None

    def stop(self) -> None:
        """Halt the session; later ticks and detections are ignored."""
        with self._lock:
            self._stopped = True
            self._field.set_repulsion_source(None)
            self._history.clear()
