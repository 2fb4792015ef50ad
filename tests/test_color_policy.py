import pytest

from color_policy import ColorPolicy, hsl_to_rgb, hex_to_rgb, validate_color
from constants import HUE_STEP, RAINBOW_SATURATION, RAINBOW_LIGHTNESS

from conftest import ScriptedRandom


@pytest.mark.parametrize("hue,expected", [
    (0, (255, 0, 0)),
    (60, (255, 255, 0)),
    (120, (0, 255, 0)),
    (240, (0, 0, 255)),
    (360, (255, 0, 0)),
])
def test_hsl_primaries(hue, expected):
    assert hsl_to_rgb(hue, 1.0, 0.5) == expected


def test_hsl_rounds_half_up():
    # 0.5 * 255 = 127.5
    assert hsl_to_rgb(200, 0.0, 0.5) == (128, 128, 128)


def test_hsl_channels_in_range():
    for hue in range(0, 360, 7):
        rgb = hsl_to_rgb(hue, RAINBOW_SATURATION, RAINBOW_LIGHTNESS)
        assert all(isinstance(c, int) and 0 <= c <= 255 for c in rgb)


@pytest.mark.parametrize("text,expected", [
    ("#ffffff", (255, 255, 255)),
    ("#3a86ff", (58, 134, 255)),
    ("#f00", (255, 0, 0)),
    ("06d6a0", (6, 214, 160)),
])
def test_hex_to_rgb(text, expected):
    assert hex_to_rgb(text) == expected


@pytest.mark.parametrize("text", ["", "#12", "#1234", "#gggggg"])
def test_hex_to_rgb_rejects_garbage(text):
    with pytest.raises(ValueError):
        hex_to_rgb(text)


@pytest.mark.parametrize("color", [(256, 0, 0), (0, -1, 0), (1, 2)])
def test_validate_color_rejects(color):
    with pytest.raises(ValueError):
        validate_color(color)


def test_rainbow_is_default():
    policy = ColorPolicy()
    assert policy.is_rainbow
    assert policy.hue == 0.0


def test_rainbow_color_uses_jittered_hue():
    policy = ColorPolicy()
    policy.hue = 90.0
    assert policy.color_for_cell(ScriptedRandom(0.0)) == hsl_to_rgb(90.0, RAINBOW_SATURATION, RAINBOW_LIGHTNESS)
    assert policy.color_for_cell(ScriptedRandom(0.5)) == hsl_to_rgb(100.0, RAINBOW_SATURATION, RAINBOW_LIGHTNESS)


def test_rainbow_hue_advances_and_wraps():
    policy = ColorPolicy()
    policy.advance()
    assert policy.hue == HUE_STEP
    policy.hue = 359.0
    policy.advance()
    assert policy.hue == pytest.approx(0.5)


def test_fixed_color_never_advances_hue():
    policy = ColorPolicy()
    policy.set_fixed_color((12, 34, 56))
    assert not policy.is_rainbow
    rng = ScriptedRandom()
    assert policy.color_for_cell(rng) == (12, 34, 56)
    assert rng.calls == 0
    policy.advance()
    assert policy.hue == 0.0

    policy.set_fixed_color(None)
    assert policy.is_rainbow
