"""Tests for RenderConfig validation, decoding, and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from flatplane import (
    BracketGlyphs,
    ConfigError,
    RenderConfig,
    encode_render_config,
    load_render_config,
    render_config_from_mapping,
)


@pytest.mark.unit
def test_defaults_are_valid() -> None:
    """The default configuration passes validation."""

    config = RenderConfig()

    config.validate()
    assert config.max_bar_width == 40
    assert config.bracket_glyphs == BracketGlyphs(top="┐", mid="-", bottom="┘")
    assert config.scaling == "down"


@pytest.mark.unit
def test_validate_reports_every_violation() -> None:
    """All invalid options are listed in a single ConfigError."""

    config = RenderConfig(
        max_bar_width=0,
        bar_glyph="**",
        column_delimiter="",
        bracket_glyphs=BracketGlyphs(top=""),
        scaling="stretch",  # type: ignore[arg-type]
    )

    with pytest.raises(ConfigError) as excinfo:
        config.validate()

    assert len(excinfo.value.errors) == 5
    message = str(excinfo.value)
    assert message.startswith("Invalid RenderConfig:\n- ")
    assert "max_bar_width must be positive" in message
    assert "bracket_glyphs.top" in message
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.unit
def test_mapping_round_trip() -> None:
    """Encoding a config and decoding the mapping yields an equal config."""

    config = RenderConfig(
        max_bar_width=12,
        bar_glyph="#",
        bracket_glyphs=BracketGlyphs(top="+", mid="=", bottom="+"),
        scaling="fit",
        show_aggregate=True,
        abbreviate_breakdown=True,
    )

    assert encode_render_config(config)["abbreviate_breakdown"] is True
    assert render_config_from_mapping(encode_render_config(config)) == config


@pytest.mark.unit
def test_mapping_accepts_bracket_glyph_list() -> None:
    """Bracket glyphs may be given as a `[top, mid, bottom]` list."""

    config = render_config_from_mapping({"bracket_glyphs": ["/", "-", "\\"]})

    assert config.bracket_glyphs == BracketGlyphs(top="/", mid="-", bottom="\\")


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {"colour": "red"},
        {"max_bar_width": -3},
        {"max_bar_width": "wide"},
        {"show_aggregate": "yes"},
        {"abbreviate_breakdown": 1},
        {"bracket_glyphs": ["a", "b"]},
        {"bracket_glyphs": {"left": "("}},
        ["max_bar_width", 3],
    ],
)
def test_mapping_rejects_invalid_payloads(payload: object) -> None:
    """Unknown keys and wrongly typed values raise ConfigError."""

    with pytest.raises(ConfigError):
        render_config_from_mapping(payload)  # type: ignore[arg-type]


@pytest.mark.integration
def test_load_render_config_from_yaml(tmp_path: Path) -> None:
    """YAML files are decoded, unwrapping a top-level `render` key."""

    path = tmp_path / "chart.yaml"
    path.write_text(
        "render:\n"
        "  max_bar_width: 20\n"
        "  bar_glyph: '#'\n"
        "  bracket_glyphs: {top: '+', mid: '-', bottom: '+'}\n"
        "  abbreviate: true\n"
        "  abbreviate_breakdown: true\n",
        encoding="utf-8",
    )

    config = load_render_config(path)

    assert config == RenderConfig(
        max_bar_width=20,
        bar_glyph="#",
        bracket_glyphs=BracketGlyphs(top="+", mid="-", bottom="+"),
        abbreviate=True,
        abbreviate_breakdown=True,
    )


@pytest.mark.integration
def test_load_render_config_empty_document_uses_defaults(tmp_path: Path) -> None:
    """An empty YAML document yields the default configuration."""

    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_render_config(path) == RenderConfig()


@pytest.mark.integration
def test_load_render_config_rejects_malformed_yaml(tmp_path: Path) -> None:
    """Unparseable YAML surfaces as a ConfigError."""

    path = tmp_path / "broken.yaml"
    path.write_text("render: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Could not parse"):
        load_render_config(path)
