"""Tests for the laser-etch SVG composer."""

import re
import xml.etree.ElementTree as ET

import pytest

from laser_etch.composer import GlyphCanvas, compose, format_number, render

SVG_NS = "{http://www.w3.org/2000/svg}"


def _dimensions(document):
    match = re.search(r'<svg [^>]*width="([^"]+)" height="([^"]+)"', document)
    assert match is not None
    return match.group(1), match.group(2)


def test_compose_laser_scenario():
    doc = compose("LASER")
    assert _dimensions(doc) == ("280", "97.6")
    assert '<text x="20" y="57.6">LASER</text>' in doc


def test_compose_empty_text_degenerates_to_padding():
    doc = compose("")
    assert _dimensions(doc) == ("40", "97.6")
    assert '<text x="20" y="57.6"></text>' in doc


@pytest.mark.parametrize("text", ["A", "LASER", "hello world", "激光刻字", "x" * 57])
def test_width_follows_character_count(text):
    width, height = _dimensions(compose(text))
    assert int(width) == len(text) * 48 + 40
    assert height == "97.6"


def test_compose_is_deterministic():
    assert compose("LASER 200um") == compose("LASER 200um")


def test_document_header_and_style_block():
    doc = compose("LASER")
    assert doc.startswith('<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n')
    assert '<svg xmlns="http://www.w3.org/2000/svg"' in doc
    assert "font-family: monospace;" in doc
    assert "font-size: 48px;" in doc
    assert "fill: none;" in doc
    assert "stroke: black;" in doc
    assert "stroke-width: 0.2;" in doc
    assert "stroke-linecap: round;" in doc
    assert doc.endswith("</svg>")


def test_plain_text_document_is_well_formed_xml():
    root = ET.fromstring(compose("LASER").encode("utf-8"))
    assert root.tag == f"{SVG_NS}svg"
    text_nodes = root.findall(f"{SVG_NS}text")
    assert len(text_nodes) == 1
    assert text_nodes[0].text == "LASER"


@pytest.mark.parametrize("text", ["a<b", "Tom & Jerry", "<tspan>x</tspan>", ""])
def test_markup_characters_are_embedded_unescaped(text):
    # embedded verbatim, no escaping
    doc = compose(text)
    assert f'<text x="20" y="57.6">{text}</text>' in doc
    assert "&amp;" not in doc and "&lt;" not in doc


def test_braces_in_text_do_not_break_template():
    assert '<text x="20" y="57.6">{width}</text>' in compose("{width}")


def test_glyph_canvas_defaults():
    canvas = GlyphCanvas.from_text("LASER")
    assert canvas.font_size == 48
    assert canvas.stroke_width == 0.2
    assert canvas.padding == 20
    assert canvas.line_height == pytest.approx(57.6)
    assert canvas.width == 280
    assert canvas.height == pytest.approx(97.6)


def test_render_matches_compose_for_default_canvas():
    assert render(GlyphCanvas.from_text("LASER")) == compose("LASER")


def test_render_custom_canvas():
    doc = render(GlyphCanvas.from_text("AB", font_size=10, stroke_width=0.5, padding=5))
    assert _dimensions(doc) == ("30", "22")
    assert "font-size: 10px;" in doc
    assert "stroke-width: 0.5;" in doc
    assert '<text x="5" y="12">AB</text>' in doc


@pytest.mark.parametrize(
    "kwargs",
    [{"font_size": 0}, {"font_size": -4}, {"padding": -1}, {"stroke_width": -0.1}],
)
def test_invalid_canvas_overrides_raise(kwargs):
    with pytest.raises(ValueError):
        GlyphCanvas.from_text("LASER", **kwargs)


@pytest.mark.parametrize(
    "value, expected",
    [(280, "280"), (280.0, "280"), (48 * 1.2, "57.6"), (48 * 1.2 + 40, "97.6"), (0.2, "0.2")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected


@pytest.mark.parametrize("kwargs", [{"stroke_width": 1e-7}, {"font_size": 1e-7}])
def test_overrides_that_round_to_zero_are_rejected(kwargs):
    with pytest.raises(ValueError):
        GlyphCanvas.from_text("LASER", **kwargs)


def test_zero_stroke_width_is_allowed():
    assert "stroke-width: 0;" in render(GlyphCanvas.from_text("A", stroke_width=0))
