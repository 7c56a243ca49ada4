import numpy as np
import pytest

from reefbuilder.biome import BIOME_COUNT, Biome, BiomeField, redistribute


def test_biome_count_is_fixed():
    assert BIOME_COUNT == 13
    assert Biome.COUNT == BIOME_COUNT == len(Biome)
    assert [int(b) for b in Biome] == list(range(13))


def test_sample_is_deterministic():
    a = BiomeField(scale=20.0)
    b = BiomeField(scale=20.0)
    for pos in [(0, 0, 0), (12.5, 3.0, -40.0), (1000, -5, 77)]:
        assert a.sample(pos) == b.sample(pos)
        assert isinstance(a.sample(pos), Biome)


def test_channels_stay_in_unit_range():
    field = BiomeField(scale=7.0)
    for x in range(-20, 20, 3):
        for c in field.channels((x, 1.5, x * 0.5)):
            assert 0.0 <= c <= 1.0


def test_grid_matches_point_samples():
    field = BiomeField(scale=10.0)
    xs = np.arange(0, 50, 10.0)
    zs = np.arange(-20, 20, 10.0)
    grid = field.sample_grid(xs, zs, y=2.0)
    assert grid.shape == (len(zs), len(xs))
    assert grid.min() >= 0 and grid.max() < BIOME_COUNT
    assert grid[1, 3] == int(field.sample((xs[3], 2.0, zs[1])))


def test_redistribute():
    assert redistribute(0.0) == 0.5
    assert redistribute(1.0) == 1.0
    # Sign is lost by squaring
    assert redistribute(0.1) == pytest.approx(redistribute(-0.1))
    assert redistribute(0.1) == pytest.approx(0.11 ** 2 / 2.42 + 0.5)
    # The full noise amplitude maps onto the top of the range
    assert redistribute(-1.0) == pytest.approx(1.0)


def test_hue_conversions():
    assert Biome.from_hue(0.0) is Biome.B00
    assert Biome.from_hue(3 / 13.0) is Biome.B03
    # A full turn wraps instead of overflowing
    assert Biome.from_hue(1.0) is Biome.B00
    assert Biome.from_int(14) is Biome.B01
    assert Biome.from_color((1.0, 0.0, 0.0)) is Biome.B00
    assert Biome.from_color((0.0, 1.0, 0.0, 1.0)) is Biome.from_hue(1 / 3.0)


def test_vertex_color_round_trips_through_hue():
    for biome in Biome:
        color = biome.vertex_color
        assert color.shape == (4,)
        assert Biome.from_color(color) is biome


def test_field_rejects_bad_configuration():
    with pytest.raises(ValueError):
        BiomeField(scale=0)
    with pytest.raises(ValueError):
        BiomeField(offsets=((0, 0, 0), (1, 1, 1)))


def test_channels_are_not_saturated():
    """Real pnoise3 values stay strictly inside the remapped range."""
    field = BiomeField(scale=5.0)
    values = np.array([field.channels((x * 3.7, y * 1.3, x * 2.1 - y))
                       for x in range(20) for y in range(20)])
    assert values.min() >= 0.5
    assert values.max() < 1.0


def test_biome_ids_spread_over_the_table():
    field = BiomeField(scale=5.0)
    coords = np.arange(0.0, 200.0, 2.5)
    grid = field.sample_grid(coords, coords, y=0.0)
    counts = np.bincount(grid.ravel(), minlength=BIOME_COUNT)
    assert np.count_nonzero(counts) >= 11
    assert counts.max() / grid.size < 0.25
