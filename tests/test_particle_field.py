import random

import pytest

from particles import DrawingBackend, ParticleField, TextRaster, repulsion_impulse
from session import ParticleConfig


class RecordingBackend(DrawingBackend):
    """Collects draw calls instead of painting."""

    def __init__(self):
        self.disks = []
        self.gradients = []

    def fill_disk(self, x, y, radius, color, alpha):
        self.disks.append((x, y, radius, color, alpha))

    def fill_radial_gradient(self, rect, center, radius, stops, opacity=1.0):
        self.gradients.append((rect, center, radius, stops, opacity))


@pytest.fixture
def config():
    return ParticleConfig(particle_count=60, star_count=8, text_particle_count=20)


@pytest.fixture
def field(config):
    return ParticleField(config, 800, 600, rng=random.Random(7))


def grid_points(n):
    return [(380 + (i % 10) * 6, 260 + (i // 10) * 6) for i in range(n)]


def test_pool_sizes(field, config):
    assert len(field.particles) == config.particle_count
    assert len(field.stars) == config.star_count
    assert field.repel_radius == config.repel_radius


def test_narrow_viewport_uses_mobile_profile(config):
    config.mobile_particle_count = 30
    config.mobile_star_count = 4
    field = ParticleField(config, 400, 700, rng=random.Random(1))
    assert len(field.particles) == 30
    assert len(field.stars) == 4
    assert field.repel_radius == config.mobile_repel_radius


def test_particles_start_inside_viewport(field):
    for p in field.particles:
        assert 0 <= p.x <= 800 and 0 <= p.y <= 600


def test_pool_identity_survives_everything(field):
    before = [id(p) for p in field.particles]
    field.assign_targets(grid_points(30))
    field.set_text_mode(True)
    for _ in range(5):
        field.tick()
    field.resize(1024, 768)
    field.set_text_mode(False)
    field.tick()
    assert [id(p) for p in field.particles] == before


@pytest.mark.parametrize("points,expected", [
    (0, 0),
    (5, 5),
    (100, 20),
])
def test_assign_count_is_bounded(field, points, expected):
    assert field.assign_targets(grid_points(points)) == expected
    assert field.text_particle_count == expected


def test_assign_bounded_by_pool(config):
    config.text_particle_count = 500
    field = ParticleField(config, 800, 600, rng=random.Random(3))
    assert field.assign_targets(grid_points(200)) == config.particle_count


def test_reassign_clears_previous_targets(field):
    field.assign_targets(grid_points(20))
    field.assign_targets(grid_points(3))
    assert field.text_particle_count == 3
    targets = {p.target for p in field.particles if p.is_text_particle}
    assert targets <= set(grid_points(3))


def test_wrap_keeps_particles_in_band(field):
    for p in field.particles:
        p.vx, p.vy = 37.0, -41.0
    for _ in range(50):
        field.tick()
        for p in field.particles:
            assert -10 <= p.x <= 810
            assert -10 <= p.y <= 610


def test_wrap_moves_to_opposite_edge(field):
    p = field.particles[0]
    p.x, p.vx = -9.5, -1.0
    field.tick()
    assert p.x == pytest.approx(810)


def test_text_round_trip(field):
    field.assign_targets(grid_points(20))
    field.set_text_mode(True)
    for _ in range(60):
        field.tick()
        assert all(0.0 <= p.draw_alpha <= 1.0 for p in field.particles)

    formed = [p for p in field.particles if p.is_text_particle]
    assert len(formed) == 20
    assert all(p.text_alpha == pytest.approx(1.0) for p in formed)
    for p in formed:
        assert abs(p.x - p.target[0]) < 5 and abs(p.y - p.target[1]) < 5

    field.set_text_mode(False)
    for _ in range(30):
        field.tick()
        assert all(0.0 <= p.draw_alpha <= 1.0 for p in field.particles)

    assert field.text_particle_count == 0
    assert all(p.text_alpha == 0.0 for p in field.particles)
    assert all(p.target is None for p in field.particles)


def test_replaced_text_fades_unassigned_particles(field):
    field.assign_targets(grid_points(20))
    field.set_text_mode(True)
    for _ in range(10):
        field.tick()
    lit = [p for p in field.particles if p.text_alpha > 0]

    field.assign_targets(grid_points(1))
    for _ in range(20):
        field.tick()
    dropped = [p for p in lit if not p.is_text_particle]
    assert dropped
    assert all(p.text_alpha == 0.0 for p in dropped)


def test_assign_text_uses_raster(field):
    count = field.assign_text("HI", TextRaster())
    assert count == 20


def test_repulsion_impulse():
    assert repulsion_impulse(0, 0, 100, 8) == (0.0, 0.0)
    assert repulsion_impulse(150, 0, 100, 8) == (0.0, 0.0)
    ix, iy = repulsion_impulse(50, 0, 100, 8)
    assert ix == pytest.approx(4.0)
    assert iy == pytest.approx(0.0)
    ix, iy = repulsion_impulse(0, -25, 100, 8)
    assert iy == pytest.approx(-6.0)


def test_fist_pushes_nearby_particles(field):
    p = field.particles[0]
    p.x, p.y, p.vx, p.vy = 400.0, 300.0, 0.0, 0.0
    field.set_repulsion_source((400.0 - field.repel_radius / 2, 300.0))
    field.tick()
    assert p.vx > 3.5


def test_no_repulsion_without_source(field):
    p = field.particles[0]
    p.x, p.y, p.vx, p.vy = 400.0, 300.0, 0.0, 0.0
    field.tick()
    assert abs(p.vx) < 0.1


def test_draw_emits_background_stars_and_particles(field):
    backend = RecordingBackend()
    field.draw(backend, now=0.0)
    assert len(backend.gradients) == 3
    assert len(backend.disks) == len(field.stars) + 2 * len(field.particles)
    assert all(0.0 <= d[4] <= 1.0 for d in backend.disks)


def test_draw_fist_glow(field):
    field.set_repulsion_source((200.0, 150.0))
    backend = RecordingBackend()
    field.draw(backend, now=1.0)
    assert len(backend.gradients) == 4
    assert backend.disks[-1][:2] == (200.0, 150.0)


def test_resize_resamples_stars(field):
    field.resize(300, 200)
    assert field.width == 300
    assert all(0 <= s.x <= 300 and 0 <= s.y <= 200 for s in field.stars)
