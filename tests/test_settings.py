import logging

import pytest

from pagetiles.presets import (
    DARK_THEME,
    LIGHT_THEME,
    RenderParams,
    get_theme,
    iter_themes,
    parse_color,
)
from pagetiles.settings import Settings, load_settings


def test_defaults_when_environment_is_empty():
    assert load_settings({}) == Settings()
    assert Settings().render_params() == RenderParams()


def test_values_are_read_from_environment():
    settings = load_settings(
        {
            "PAGETILES_TILE_SIZE": "512",
            "PAGETILES_SCALE": "1.5",
            "PAGETILES_THEME": "Dark",
            "PAGETILES_LOG_LEVEL": "debug",
        }
    )
    assert settings == Settings(tile_size=512, scale=1.5, theme="dark", log_level="DEBUG")
    assert settings.render_params().tile_size == 512


def test_invalid_values_fall_back_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="pagetiles.settings"):
        settings = load_settings(
            {
                "PAGETILES_TILE_SIZE": "big",
                "PAGETILES_SCALE": "-2",
                "PAGETILES_THEME": "sepia",
            }
        )
    assert settings == Settings()
    assert len(caplog.records) == 3


def test_get_theme():
    assert get_theme("LIGHT") is LIGHT_THEME
    assert get_theme("dark") is DARK_THEME
    assert DARK_THEME.invert and not LIGHT_THEME.invert
    assert {t.name for t in iter_themes()} == {"light", "dark"}
    with pytest.raises(KeyError):
        get_theme("sepia")


def test_render_params_clamp_and_copy():
    params = RenderParams(min_scale=0.5, max_scale=4.0)
    assert params.clamp_scale(0.1) == 0.5
    assert params.clamp_scale(10) == 4.0
    assert params.clamp_scale(2) == 2
    assert params.copy(tile_size=128).tile_size == 128
    assert params.to_dict()["max_scale"] == 4.0


@pytest.mark.parametrize(
    "value, expected",
    [
        ("#1A1B26", (0x1A, 0x1B, 0x26, 255)),
        ("#1A1B2680", (0x1A, 0x1B, 0x26, 0x80)),
        ("10, 20, 30", (10, 20, 30, 255)),
        ("10;20;30;40", (10, 20, 30, 40)),
        ("", None),
        (None, None),
    ],
)
def test_parse_color(value, expected):
    assert parse_color(value) == expected


@pytest.mark.parametrize("value", ["#123", "1,2", "0,0,300"])
def test_parse_color_rejects_bad_values(value):
    with pytest.raises(ValueError):
        parse_color(value)


def test_dark_background_setting():
    settings = load_settings({"PAGETILES_DARK_BACKGROUND": "#000000"})
    assert settings.dark_background == (0, 0, 0, 255)
    assert load_settings({}).dark_background == DARK_THEME.background


def test_invalid_dark_background_falls_back(caplog):
    with caplog.at_level(logging.WARNING, logger="pagetiles.settings"):
        settings = load_settings({"PAGETILES_DARK_BACKGROUND": "nope"})
    assert settings.dark_background == DARK_THEME.background
    assert "PAGETILES_DARK_BACKGROUND" in caplog.text


def test_theme_copy_overrides_background():
    custom = DARK_THEME.copy(background=(1, 2, 3, 255))
    assert custom.invert
    assert custom.to_dict()["background"] == [1, 2, 3, 255]
