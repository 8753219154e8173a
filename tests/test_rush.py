from datetime import datetime
import pytest

from canteen.scheduler import RushIntensityModel
from canteen.scheduler.service import KitchenScheduler
from canteen.core.config import Settings
from canteen.schemas import RushWindow


def _at(hour, minute):
    return datetime(2025, 3, 10, hour, minute)


@pytest.fixture()
def model():
    return KitchenScheduler(Settings()).rush_model


@pytest.mark.parametrize("hour,minute,expected", [
    (8, 59, 0.2),
    (9, 0, 0.9),
    (9, 59, 0.9),
    (10, 0, 0.2),
    (11, 59, 0.2),
    (12, 0, 1.0),
    (13, 29, 1.0),
    (13, 30, 0.2),
    (15, 29, 0.2),
    (15, 30, 0.7),
    (16, 59, 0.7),
    (17, 0, 0.2),
    (0, 0, 0.2),
    (23, 59, 0.2),
])
def test_default_windows_half_open(model, hour, minute, expected):
    assert model.intensity_at(_at(hour, minute)) == expected


def test_every_minute_maps_to_a_known_intensity(model):
    seen = {
        model.intensity_at(_at(h, m))
        for h in range(24) for m in range(60)
    }
    assert seen == {0.9, 1.0, 0.7, 0.2}


def test_date_is_ignored(model):
    assert model.intensity_at(datetime(2024, 12, 25, 12, 30)) == model.intensity_at(_at(12, 30))


def test_first_declared_window_wins():
    model = RushIntensityModel(
        [RushWindow(start=8, end=9, intensity=0.5), RushWindow(start=8.5, end=10, intensity=0.9)],
        baseline=0.1,
    )
    assert model.intensity_at(_at(8, 45)) == 0.5
    assert model.intensity_at(_at(9, 15)) == 0.9
    assert model.intensity_at(_at(7, 0)) == 0.1


def test_hour_value():
    assert RushIntensityModel.hour_value(_at(13, 30)) == 13.5
