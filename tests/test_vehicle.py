import pytest

import constants
from vehicle import Vehicle
from viewport import ViewportMapper


@pytest.fixture
def vehicle(geometry):
    return Vehicle(geometry, speed=10.0, width=140.0, height=100.0, road_offset=10.0)


def test_starts_off_surface(vehicle):
    assert vehicle.position == pytest.approx(-140.0)


def test_update_advances_by_speed_times_dt(vehicle):
    vehicle.position = 0.0
    vehicle.update(1.0)
    assert vehicle.position == pytest.approx(10.0)


def test_wraps_to_start_after_leaving_surface(vehicle, geometry):
    vehicle.position = geometry.surface_width - 1
    vehicle.update(1.0)
    assert vehicle.position == pytest.approx(-vehicle.width)


def test_sits_on_the_road_line(vehicle, geometry):
    assert vehicle.y == pytest.approx(geometry.road_line - 100.0 + 10.0)


def test_resize_rescales_and_reseats(vehicle, scene_config):
    smaller = ViewportMapper(scene_config["viewport"]).recompute(960, 540)
    vehicle.apply_geometry(smaller)

    assert vehicle.width == pytest.approx(70.0)
    assert vehicle.height == pytest.approx(50.0)
    assert vehicle.y == pytest.approx(smaller.road_line - 50.0 + 5.0)


def test_from_config(scene_config, geometry):
    vehicle = Vehicle.from_config(scene_config["vehicle"], geometry)
    assert vehicle.speed == scene_config["vehicle"]["speed"]
    assert vehicle.width == pytest.approx(scene_config["vehicle"]["width"])


def test_reset_returns_to_start(vehicle):
    vehicle.update(30.0)
    vehicle.reset()
    assert vehicle.position == pytest.approx(vehicle.start_position)


def test_draws_placeholder_rectangle_without_image(vehicle, screen):
    vehicle.position = 100.0
    vehicle.draw(screen)

    centre = (int(vehicle.position + vehicle.width / 2), int(vehicle.y + vehicle.height / 2))
    assert tuple(screen.get_at(centre))[:3] == constants.VEHICLE_RED


def test_resize_keeps_relative_position(vehicle, scene_config):
    vehicle.position = 1500.0
    narrower = ViewportMapper(scene_config["viewport"]).recompute(960, 1080)
    vehicle.apply_geometry(narrower)
    vehicle.update(0.0)

    assert vehicle.position == pytest.approx(750.0)
