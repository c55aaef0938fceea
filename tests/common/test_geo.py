import pytest

from ponto_certo.common.geo import haversine_meters


def test_same_point_is_zero():
    assert haversine_meters(-23.5505, -46.6333, -23.5505, -46.6333) == 0


def test_known_distance():
    # one hundredth of a degree of latitude is about 1.1 km
    assert haversine_meters(-23.55, -46.63, -23.56, -46.63) == pytest.approx(1112, rel=0.01)
