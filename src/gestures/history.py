"""
Per-hand ring buffers of landmark-derived features for motion gestures.
"""
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Tuple

from .landmarks import HandLandmarks, TRACKED_POINTS
from .predicates import distance_2d, finger_states


@dataclass(frozen=True)
class FeatureSnapshot:
    """Features of one hand in one frame."""
    wrist: Tuple[float, float]
    palm: Tuple[float, float]
    thumb_tip: Tuple[float, float]
    index_tip: Tuple[float, float]
    pinch: float
    fingers: Tuple[bool, bool, bool, bool]

    @property
    def all_up(self) -> bool:
        return all(self.fingers)

    @property
    def all_down(self) -> bool:
        return not any(self.fingers)

    @classmethod
    def from_landmarks(cls, landmarks: HandLandmarks) -> "FeatureSnapshot":
        return cls(
            wrist=landmarks.xy(HandLandmarks.WRIST),
            palm=landmarks.xy(HandLandmarks.MIDDLE_MCP),
            thumb_tip=landmarks.xy(HandLandmarks.THUMB_TIP),
            index_tip=landmarks.xy(HandLandmarks.INDEX_TIP),
            pinch=distance_2d(landmarks.thumb_tip, landmarks.index_tip),
            fingers=finger_states(landmarks),
        )


class HandHistory:
    """Bounded history for one hand slot. Oldest samples are evicted."""

    POINTS = TRACKED_POINTS

    def __init__(self, capacity: int = 25):
        self._samples: Deque[FeatureSnapshot] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def append(self, snapshot: FeatureSnapshot) -> None:
        self._samples.append(snapshot)

    def clear(self) -> None:
        self._samples.clear()

    def recent(self, frames: int) -> Optional[List[FeatureSnapshot]]:
        """Last `frames` snapshots, or None if not enough have been seen."""
        if frames <= 0 or len(self._samples) < frames:
            return None
        return list(self._samples)[-frames:]

    def series(self, point: str, frames: int) -> Optional[List[Tuple[float, float]]]:
        """Positions of one tracked point over the last `frames` snapshots."""
        if point not in self.POINTS:
            raise KeyError(f"Unknown history point: {point}")
        recent = self.recent(frames)
        if recent is None:
            return None
        return [getattr(s, point) for s in recent]

    def motion(self, frames: int, point: str = 'wrist') -> Optional[Tuple[float, float, float]]:
        """Net (dx, dy, magnitude) of a point across the window."""
        samples = self.series(point, frames)
        if samples is None:
            return None
        dx = samples[-1][0] - samples[0][0]
        dy = samples[-1][1] - samples[0][1]
        return (dx, dy, (dx * dx + dy * dy) ** 0.5)


class LandmarkHistory:
    """One HandHistory per detector hand slot."""

    def __init__(self, slots: int = 2, capacity: int = 25):
        self._hands = [HandHistory(capacity) for _ in range(slots)]

    def __getitem__(self, slot: int) -> HandHistory:
        return self._hands[slot]

    def __len__(self) -> int:
        return len(self._hands)

    def push(self, slot: int, landmarks: HandLandmarks) -> None:
        if slot < len(self._hands):
            self._hands[slot].append(FeatureSnapshot.from_landmarks(landmarks))

    def retain(self, visible: int) -> None:
        """Clear every slot at or beyond the number of visible hands."""
        for hand in self._hands[visible:]:
            hand.clear()

    def clear(self, slot: Optional[int] = None) -> None:
        """Clear one slot, or every slot when slot is None."""
        if slot is not None:
            self._hands[slot].clear()
            return
        for hand in self._hands:
            hand.clear()
