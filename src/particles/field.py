"""
Particle field simulation.

A fixed pool of particles drifts across a toroidal viewport. A subset can
be assigned glyph targets to spell text, and a repulsion source (the fist
position) pushes nearby particles away.
"""
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from session.config import ParticleConfig
from .backend import Color, DrawingBackend
from .text_raster import TextRaster


GLOW_COLORS: List[Color] = [
    (255, 255, 255),
    (230, 235, 255),
    (245, 245, 255),
    (220, 230, 250),
    (250, 250, 255),
]

STAR_COLORS: List[Color] = [
    (255, 255, 255), (240, 240, 255), (232, 232, 255), (250, 250, 254),
    (245, 245, 255), (221, 228, 255), (238, 238, 255), (255, 255, 255),
]

FIST_CORE_RADIUS = 4.0


@dataclass
class Particle:
    """One point of light. Mutated in place every tick."""
    x: float
    y: float
    vx: float
    vy: float
    size: float
    color_index: int
    alpha: float
    pulse: float
    pulse_speed: float
    target: Optional[Tuple[float, float]] = None
    is_text_particle: bool = False
    text_alpha: float = 0.0

    @property
    def pulse_alpha(self) -> float:
        return self.alpha + math.sin(self.pulse) * 0.15

    @property
    def draw_alpha(self) -> float:
        a = self.pulse_alpha
        if self.is_text_particle:
            a = max(a, self.text_alpha)
        return max(0.0, min(1.0, a))


@dataclass
class Star:
    """Background decoration with its own twinkle phase."""
    x: float
    y: float
    size: float
    twinkle: float
    twinkle_speed: float
    color: Color

    @property
    def alpha(self) -> float:
        return 0.3 + math.sin(self.twinkle) * 0.3


def repulsion_impulse(
    dx: float,
    dy: float,
    radius: float,
    strength: float,
) -> Tuple[float, float]:
    """
    Velocity impulse for a particle at offset (dx, dy) from the source.

    Points radially outward with magnitude strength * (radius - d) / radius
    inside the radius, zero outside it and at the source itself.
    """
    dist = math.hypot(dx, dy)
    if dist <= 0 or dist >= radius:
        return (0.0, 0.0)
    force = (radius - dist) / radius
    return (dx / dist * force * strength, dy / dist * force * strength)


class ParticleField:
    """
    Owns the particle pool and the star background.

    The pool size is decided once from the initial viewport width and never
    changes; particles are only ever mutated.
    """

    def __init__(
        self,
        config: ParticleConfig,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
    ):
        self._config = config
        self._rng = rng or random.Random()
        self.width = width
        self.height = height

        narrow = width < config.mobile_breakpoint
        count = config.mobile_particle_count if narrow else config.particle_count
        self._star_count = config.mobile_star_count if narrow else config.star_count
        self.repel_radius = config.mobile_repel_radius if narrow else config.repel_radius

        self._particles: List[Particle] = [self._spawn() for _ in range(count)]
        self._stars: List[Star] = []
        self._spawn_stars()

        self.text_mode = False
        self._repulsion: Optional[Tuple[float, float]] = None

    # ------------------------------------------------------------------
    # Pool
    # ------------------------------------------------------------------

    def _spawn(self) -> Particle:
        rnd = self._rng.random
        speed = self._config.base_speed
        return Particle(
            x=rnd() * self.width,
            y=rnd() * self.height,
            vx=(rnd() - 0.5) * speed,
            vy=(rnd() - 0.5) * speed,
            size=rnd() * 2.5 + 0.5,
            color_index=self._rng.randrange(len(GLOW_COLORS)),
            alpha=rnd() * 0.6 + 0.3,
            pulse=rnd() * math.pi * 2,
            pulse_speed=rnd() * 0.02 + 0.005,
        )

    def _spawn_stars(self) -> None:
        rnd = self._rng.random
        self._stars = [
            Star(
                x=rnd() * self.width,
                y=rnd() * self.height,
                size=rnd() * 1.5 + 0.2,
                twinkle=rnd() * math.pi * 2,
                twinkle_speed=rnd() * 0.03 + 0.01,
                color=self._rng.choice(STAR_COLORS),
            )
            for _ in range(self._star_count)
        ]

    @property
    def particles(self) -> List[Particle]:
        return self._particles

    @property
    def stars(self) -> List[Star]:
        return self._stars

    @property
    def text_particle_count(self) -> int:
        return sum(1 for p in self._particles if p.is_text_particle)

    def resize(self, width: int, height: int) -> None:
        """Adopt new viewport bounds. Stars are resampled, the pool is kept."""
        self.width = width
        self.height = height
        self._spawn_stars()

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    @property
    def repulsion_source(self) -> Optional[Tuple[float, float]]:
        return self._repulsion

    def set_repulsion_source(self, point: Optional[Tuple[float, float]]) -> None:
        self._repulsion = point

    def set_text_mode(self, active: bool) -> None:
        self.text_mode = active

    def clear_targets(self) -> None:
        for p in self._particles:
            p.is_text_particle = False
            p.target = None

    def assign_targets(self, points: Sequence[Tuple[float, float]]) -> int:
        """
        Hand a random subset of points to a random subset of particles.

        Previous assignments are always cleared first. Particles left out keep
        any text alpha they had and fade it out while scattering.

        Returns:
            Number of particles that received a target.
        """
        self.clear_targets()
        count = min(self._config.text_particle_count, len(points), len(self._particles))
        if count <= 0:
            return 0

        chosen_points = self._rng.sample(list(points), count)
        chosen_particles = self._rng.sample(self._particles, count)
        for p, (tx, ty) in zip(chosen_particles, chosen_points):
            p.target = (float(tx), float(ty))
            p.is_text_particle = True
        return count

    def assign_text(
        self,
        text: str,
        raster: TextRaster,
        font_size: Optional[float] = None,
    ) -> int:
        """Sample text at the current viewport size and assign it."""
        points = raster.sample(text, self.width, self.height, font_size)
        return self.assign_targets(points)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Advance every particle by one frame."""
        cfg = self._config
        rnd = self._rng.random

        for p in self._particles:
            # 1. Alpha pulse
            p.pulse += p.pulse_speed

            # 2. Exactly one velocity rule
            if self.text_mode and p.is_text_particle and p.target is not None:
                tx, ty = p.target
                p.vx += (tx - p.x) * cfg.text_form_speed
                p.vy += (ty - p.y) * cfg.text_form_speed
                p.vx *= cfg.text_converge_damping
                p.vy *= cfg.text_converge_damping
                p.text_alpha = min(1.0, p.text_alpha + cfg.text_fade_in)
            elif p.is_text_particle or p.text_alpha > 0:
                p.text_alpha = max(0.0, p.text_alpha - cfg.text_scatter_speed)
                if p.text_alpha <= 0:
                    p.is_text_particle = False
                    p.target = None
                p.vx += (rnd() - 0.5) * cfg.scatter_jitter
                p.vy += (rnd() - 0.5) * cfg.scatter_jitter
                p.vx *= cfg.friction
                p.vy *= cfg.friction
            else:
                p.vx += (rnd() - 0.5) * cfg.ambient_jitter
                p.vy += (rnd() - 0.5) * cfg.ambient_jitter
                p.vx *= cfg.ambient_damping
                p.vy *= cfg.ambient_damping

            # 3. Fist repulsion
            if self._repulsion is not None:
                ix, iy = repulsion_impulse(
                    p.x - self._repulsion[0],
                    p.y - self._repulsion[1],
                    self.repel_radius,
                    cfg.repel_strength,
                )
                p.vx += ix
                p.vy += iy

            # 4. Integrate
            p.x += p.vx
            p.y += p.vy

            # 5. Toroidal wrap
            self._wrap(p)

        for s in self._stars:
            s.twinkle += s.twinkle_speed

    def _wrap(self, p: Particle) -> None:
        m = self._config.wrap_margin
        if p.x < -m:
            p.x = self.width + m
        elif p.x > self.width + m:
            p.x = -m
        if p.y < -m:
            p.y = self.height + m
        elif p.y > self.height + m:
            p.y = -m

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, backend: DrawingBackend, now: float) -> None:
        """Emit the draw commands for one frame (now in seconds)."""
        self._draw_background(backend, now)

        for s in self._stars:
            backend.fill_disk(s.x, s.y, s.size, s.color, max(0.0, s.alpha))

        for p in self._particles:
            color = GLOW_COLORS[p.color_index]
            a = p.draw_alpha
            backend.fill_disk(p.x, p.y, p.size * 3, color, a * 0.15)
            backend.fill_disk(p.x, p.y, p.size, color, a)

        self._draw_fist_glow(backend)

    def _draw_background(self, backend: DrawingBackend, now: float) -> None:
        w, h = self.width, self.height
        full = (0.0, 0.0, float(w), float(h))

        # Deep-space gradient
        backend.fill_radial_gradient(full, (w / 2, h / 2), w * 0.7, [
            (0.0, (10, 10, 26, 1.0)),
            (0.5, (5, 5, 16, 1.0)),
            (1.0, (0, 0, 5, 1.0)),
        ])

        # Drifting nebula glow
        t = now * 0.1
        backend.fill_radial_gradient(
            full,
            (w * 0.3 + math.sin(t) * 100, h * 0.4 + math.cos(t * 0.7) * 80),
            w * 0.4,
            [(0.0, (42, 26, 94, 1.0)), (0.5, (26, 10, 62, 1.0)), (1.0, (26, 10, 62, 0.0))],
            opacity=0.04,
        )
        backend.fill_radial_gradient(
            full,
            (w * 0.7 + math.cos(t * 1.2) * 80, h * 0.6 + math.sin(t * 0.8) * 60),
            w * 0.35,
            [(0.0, (10, 42, 94, 1.0)), (0.5, (10, 26, 62, 1.0)), (1.0, (10, 26, 62, 0.0))],
            opacity=0.04,
        )

    def _draw_fist_glow(self, backend: DrawingBackend) -> None:
        if self._repulsion is None:
            return
        fx, fy = self._repulsion
        r = self.repel_radius
        backend.fill_radial_gradient((fx - r, fy - r, 2 * r, 2 * r), (fx, fy), r, [
            (0.0, (255, 255, 255, 0.12)),
            (0.5, (220, 225, 255, 0.04)),
            (1.0, (220, 225, 255, 0.0)),
        ])
        backend.fill_disk(fx, fy, FIST_CORE_RADIUS, (255, 255, 255), 0.7)
