import numpy as np
import pytest

from assets import ImageHandle
from fireworks import Firework, FireworkEmitter, FireworkState, FireworkVariant
from viewport import ViewportMapper


@pytest.fixture
def firework_config(scene_config):
    return scene_config["fireworks"]


@pytest.fixture
def emitter(firework_config, rng, geometry):
    return FireworkEmitter(firework_config, rng, geometry)


def exploded_burst(config, rng):
    # Target below the launch height: bursts on creation.
    return Firework(500.0, 100.0, 200.0, FireworkVariant.BURST, config, rng)


def test_rising_firework_has_no_particles(firework_config, rng):
    firework = Firework(500.0, 810.0, 200.0, FireworkVariant.BURST, firework_config, rng)
    firework.update(1.0)

    assert firework.state is FireworkState.RISING
    assert firework.y == pytest.approx(810.0 - firework_config["ascent_rate"])
    assert firework.particle_count == 0
    assert not firework.is_finished()


def test_reaching_target_bursts_with_full_particle_count(firework_config, rng):
    firework = Firework(500.0, 810.0, 200.0, FireworkVariant.BURST, firework_config, rng)
    firework.update(10.0)

    assert firework.state is FireworkState.EXPLODED
    assert firework.y == pytest.approx(200.0)
    assert firework.particle_count == firework_config["burst_size"]
    np.testing.assert_array_equal(firework.alphas, 1.0)
    np.testing.assert_allclose(firework.positions, [[500.0, 200.0]] * firework_config["burst_size"])


def test_burst_velocities_stay_within_speed_range(firework_config, rng):
    firework = exploded_burst(firework_config, rng)
    speeds = np.hypot(firework.velocities[:, 0], firework.velocities[:, 1])
    assert np.all(speeds >= firework_config["particle_speed_min"] - 1e-9)
    assert np.all(speeds <= firework_config["particle_speed_max"] + 1e-9)


def test_particles_fall_and_fade_each_tick(firework_config, rng):
    firework = exploded_burst(firework_config, rng)
    positions = firework.positions.copy()
    velocities = firework.velocities.copy()

    firework.update(0.016)

    np.testing.assert_allclose(firework.positions, positions + velocities)
    np.testing.assert_allclose(firework.velocities[:, 1], velocities[:, 1] + firework_config["gravity"])
    np.testing.assert_allclose(firework.alphas, 1.0 - firework_config["alpha_decay"])


def test_particle_count_never_grows_and_burst_finishes_only_when_empty(firework_config, rng):
    firework = exploded_burst(firework_config, rng)
    counts = [firework.particle_count]

    for _ in range(200):
        firework.update(0.016)
        counts.append(firework.particle_count)
        assert firework.is_finished() == (firework.particle_count == 0)

    assert all(a >= b for a, b in zip(counts, counts[1:]))
    assert firework.is_finished()


def test_logo_variant_finishes_on_life_counter(firework_config, rng):
    firework_config["logo_lifetime"] = 1.6
    firework = Firework(500.0, 100.0, 200.0, FireworkVariant.LOGO, firework_config, rng)

    for _ in range(6):
        firework.update(0.25)
        assert firework.particle_count == 0
        assert not firework.is_finished()
    assert firework.logo_alpha == pytest.approx(1.0 - 1.5 / 1.6)

    firework.update(0.25)
    assert firework.is_finished()
    assert firework.logo_alpha == 0.0


def test_tick_spawns_batch_at_anchors_after_interval(emitter, geometry):
    assert emitter.tick(4.9) == []
    spawned = emitter.tick(0.2)

    assert len(spawned) == len(emitter.anchors)
    assert emitter.timer == 0.0
    assert all(f.variant is FireworkVariant.LOGO for f in spawned)
    assert spawned[0].origin_x == pytest.approx(0.2 * geometry.surface_width)
    assert spawned[0].target_y == pytest.approx(0.2 * geometry.surface_height)


def test_spawn_respects_live_cap(firework_config, rng, geometry):
    firework_config["max_live"] = 2
    emitter = FireworkEmitter(firework_config, rng, geometry)

    assert emitter.spawn_at(100, 100) is not None
    assert emitter.spawn_at(200, 100) is not None
    assert emitter.spawn_at(300, 100) is None
    assert len(emitter.fireworks) == 2


def test_update_drops_finished_fireworks(emitter):
    emitter.spawn_at(100, 100)
    for _ in range(400):
        emitter.update(0.033)
    assert emitter.fireworks == []


def test_reset_clears_fireworks_and_timer(emitter):
    emitter.spawn_at(100, 100)
    emitter.tick(3.0)
    emitter.reset()
    assert emitter.fireworks == []
    assert emitter.timer == 0.0


def test_draw_all_stages_without_assets(firework_config, rng, screen):
    rising = Firework(500.0, 810.0, 200.0, FireworkVariant.BURST, firework_config, rng)
    burst = exploded_burst(firework_config, rng)
    logo = Firework(500.0, 100.0, 200.0, FireworkVariant.LOGO, firework_config, rng)

    rising.draw(screen)
    burst.draw(screen)
    logo.draw(screen, ImageHandle("missing.png"))
    logo.draw(screen)


def test_logo_size_follows_scale_factor(firework_config, rng, screen):
    firework_config["logo_size"] = 100.0
    logo = Firework(500.0, 100.0, 200.0, FireworkVariant.LOGO, firework_config, rng)

    screen.fill((0, 0, 0))
    logo.draw(screen, scale=0.5)

    assert tuple(screen.get_at((500, 200)))[:3] != (0, 0, 0)
    assert tuple(screen.get_at((535, 200)))[:3] == (0, 0, 0)


def test_emitter_draws_logo_at_geometry_scale(firework_config, rng, scene_config, screen):
    firework_config["logo_size"] = 100.0
    half = ViewportMapper(scene_config["viewport"]).recompute(960, 540)
    emitter = FireworkEmitter(firework_config, rng, half)
    emitter.fireworks.append(Firework(500.0, 100.0, 200.0, FireworkVariant.LOGO, firework_config, rng))

    screen.fill((0, 0, 0))
    emitter.draw(screen)

    assert tuple(screen.get_at((535, 200)))[:3] == (0, 0, 0)


def test_emitter_reuses_particle_layer(emitter, firework_config, rng, screen):
    emitter.fireworks.append(exploded_burst(firework_config, rng))
    emitter.draw(screen)
    layer = emitter.layer
    emitter.draw(screen)

    assert emitter.layer is layer
    assert layer.get_size() == screen.get_size()
