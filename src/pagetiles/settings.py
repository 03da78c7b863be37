"""Environment driven settings.

Values come from ``PAGETILES_*`` environment variables. A ``.env`` file in
the working directory is loaded first when present. Invalid values are
logged and replaced by defaults so a bad variable never prevents startup.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional, TypeVar

from dotenv import load_dotenv

from .presets import DARK_THEME, THEMES, Color8, RenderParams, parse_color

logger = logging.getLogger(__name__)

ENV_PREFIX = "PAGETILES_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

T = TypeVar("T")


@dataclass(frozen=True)
class Settings:
    tile_size: int = RenderParams.tile_size
    scale: float = RenderParams.scale
    theme: str = "light"
    log_level: str = "INFO"
    dark_background: Color8 = DARK_THEME.background

    def render_params(self) -> RenderParams:
        return RenderParams(tile_size=self.tile_size, scale=self.scale)


def _read(
    env: Mapping[str, str], name: str, convert: Callable[[str], T], default: T,
    check: Optional[Callable[[T], bool]] = None,
) -> T:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = convert(raw.strip())
    except ValueError:
        logger.warning("Ignoring %s%s=%r: not a valid value", ENV_PREFIX, name, raw)
        return default
    if check is not None and not check(value):
        logger.warning("Ignoring %s%s=%r: out of range", ENV_PREFIX, name, raw)
        return default
    return value


def load_settings(env: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from ``env`` (defaults to ``os.environ``)."""

    if env is None:
        if dotenv:
            load_dotenv()
        env = os.environ

    defaults = Settings()
    return Settings(
        tile_size=_read(env, "TILE_SIZE", int, defaults.tile_size, lambda v: v > 0),
        scale=_read(env, "SCALE", float, defaults.scale, lambda v: v > 0),
        theme=_read(env, "THEME", str.lower, defaults.theme, lambda v: v in THEMES),
        log_level=_read(env, "LOG_LEVEL", str.upper, defaults.log_level, lambda v: v in LOG_LEVELS),
        dark_background=_read(env, "DARK_BACKGROUND", parse_color, defaults.dark_background),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
