"""Render configuration for flatplane charts.

RenderConfig is a plain value object. Constructing one never fails; values are
validated when rendering is requested (`RenderConfig.validate`), so an invalid
configuration never produces partial output.

Configurations may also be decoded from mappings or YAML documents, e.g.:

    render:
      max_bar_width: 30
      bar_glyph: "#"
      bracket_glyphs: {top: "+", mid: "-", bottom: "+"}
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, get_args

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

ScalingPolicy = Literal["down", "fit"]


@dataclass(frozen=True, slots=True)
class BracketGlyphs:
    """Glyphs joining grouped rows to their shared label.

    Args:
        top: Drawn on rows above the label row.
        mid: Drawn on the label row itself.
        bottom: Drawn on rows below the label row.
    """

    top: str = "┐"
    mid: str = "-"
    bottom: str = "┘"

    @property
    def width(self) -> int:
        """Return the width of the widest glyph."""

        return max(len(self.top), len(self.mid), len(self.bottom))


@dataclass(frozen=True, slots=True)
class RenderConfig:
    """Options controlling BarChart output.

    Args:
        max_bar_width: Glyph budget for the longest bar of each breakdown column.
        bar_glyph: Character repeated to draw positive bars.
        negative_glyph: Character repeated to draw negative bars.
        bracket_glyphs: Glyphs used for multi-row group brackets.
        column_delimiter: Character bounding the breakdown area.
        scaling: "down" draws values literally unless they exceed `max_bar_width`;
            "fit" always scales the largest value to `max_bar_width`.
        show_aggregate: Whether to show each outer group's total as `[value]`.
        abbreviate: Whether to shorten long grouping values to unique abbreviations.
        abbreviate_breakdown: Whether to shorten long breakdown column headings to
            unique abbreviations no narrower than the widest bar.
    """

    max_bar_width: int = 40
    bar_glyph: str = "*"
    negative_glyph: str = "⊖"
    bracket_glyphs: BracketGlyphs = field(default_factory=BracketGlyphs)
    column_delimiter: str = "|"
    scaling: ScalingPolicy = "down"
    show_aggregate: bool = False
    abbreviate: bool = False
    abbreviate_breakdown: bool = False

    def validate(self) -> None:
        """Validate every option.

        Raises:
            ConfigError: Listing every violation found.
        """

        errors: list[str] = []

        if isinstance(self.max_bar_width, bool) or not isinstance(self.max_bar_width, int):
            errors.append(f"max_bar_width must be an integer, got {self.max_bar_width!r}.")
        elif self.max_bar_width <= 0:
            errors.append(f"max_bar_width must be positive, got {self.max_bar_width}.")

        for name in ("bar_glyph", "negative_glyph", "column_delimiter"):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) != 1 or value.isspace():
                errors.append(f"{name} must be a single visible character, got {value!r}.")

        if not isinstance(self.bracket_glyphs, BracketGlyphs):
            errors.append(f"bracket_glyphs must be BracketGlyphs, got {self.bracket_glyphs!r}.")
        else:
            for name in ("top", "mid", "bottom"):
                value = getattr(self.bracket_glyphs, name)
                if not isinstance(value, str) or not value or "\n" in value:
                    errors.append(f"bracket_glyphs.{name} must be a non-empty single-line string, got {value!r}.")

        if self.scaling not in get_args(ScalingPolicy):
            errors.append(f"scaling must be one of {list(get_args(ScalingPolicy))}, got {self.scaling!r}.")

        for name in ("show_aggregate", "abbreviate", "abbreviate_breakdown"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a boolean, got {getattr(self, name)!r}.")

        if errors:
            raise ConfigError(errors)


def encode_render_config(config: RenderConfig) -> dict[str, Any]:
    """Encode a RenderConfig into a plain (YAML/JSON friendly) dictionary."""

    return {
        "max_bar_width": config.max_bar_width,
        "bar_glyph": config.bar_glyph,
        "negative_glyph": config.negative_glyph,
        "bracket_glyphs": {
            "top": config.bracket_glyphs.top,
            "mid": config.bracket_glyphs.mid,
            "bottom": config.bracket_glyphs.bottom,
        },
        "column_delimiter": config.column_delimiter,
        "scaling": config.scaling,
        "show_aggregate": config.show_aggregate,
        "abbreviate": config.abbreviate,
        "abbreviate_breakdown": config.abbreviate_breakdown,
    }


def render_config_from_mapping(payload: Mapping[str, Any]) -> RenderConfig:
    """Decode a RenderConfig from a mapping, applying defaults for missing keys.

    Args:
        payload: Mapping such as a parsed YAML document.

    Returns:
        A validated RenderConfig.

    Raises:
        ConfigError: When keys are unknown or values are invalid.
    """

    if not isinstance(payload, Mapping):
        raise ConfigError(f"Render configuration must be a mapping, got {type(payload).__name__}.")

    known = {item.name for item in fields(RenderConfig)}
    unknown = sorted(str(key) for key in payload if key not in known)
    if unknown:
        raise ConfigError(f"Unknown render configuration keys: {unknown}.")

    options = dict(payload)
    if "bracket_glyphs" in options:
        options["bracket_glyphs"] = _parse_bracket_glyphs(options["bracket_glyphs"])

    config = RenderConfig(**options)
    config.validate()
    return config


def load_render_config(path: str | Path) -> RenderConfig:
    """Load a RenderConfig from a YAML file.

    An empty document yields the defaults, and a top-level `render:` key is
    unwrapped when present.

    Raises:
        ConfigError: When the document is not valid YAML or holds invalid options.
        OSError: When the file cannot be read.
    """

    raw = Path(path).read_text(encoding="utf-8")
    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse render configuration {str(path)!r}: {exc}") from exc

    if isinstance(payload, Mapping) and set(payload) == {"render"}:
        payload = payload["render"] or {}

    config = render_config_from_mapping(payload)
    logger.debug("Loaded render configuration from %s", path)
    return config


def _parse_bracket_glyphs(value: object) -> BracketGlyphs:
    """Decode bracket glyphs from a mapping or a `[top, mid, bottom]` list."""

    if isinstance(value, BracketGlyphs):
        return value
    if isinstance(value, Mapping):
        unknown = sorted(str(key) for key in value if key not in {"top", "mid", "bottom"})
        if unknown:
            raise ConfigError(f"Unknown bracket_glyphs keys: {unknown}.")
        return BracketGlyphs(**{str(key): item for key, item in value.items()})
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return BracketGlyphs(top=value[0], mid=value[1], bottom=value[2])
    raise ConfigError(f"bracket_glyphs must be a mapping or a [top, mid, bottom] list, got {value!r}.")
