"""composer.py
===============
该模块负责把一行文字拼成"激光刻字"风格的 SVG 文档：
1. 根据字号/留白推导画布尺寸（GlyphCanvas）；
2. 用字符串模板输出带 XML 声明的 SVG，文字只描边不填充，模拟激光细线；
3. 输出完全确定，同样的输入永远得到逐字节相同的文档。

实现约定：
- 文字原样嵌入 <text>，不做任何转义（仅面向本机自用场景）；
- 数值格式沿用网页版习惯：整数不带小数点，浮点去掉运算噪声（57.6 而不是 57.599999999999994）。
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)

FONT_SIZE = 48
STROKE_WIDTH = 0.2
PADDING = 20
LINE_HEIGHT_RATIO = 1.2
_NUMBER_DIGITS = 6

SVG_TEMPLATE = """<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}">
  <style>
    text {{
      font-family: monospace;
      font-size: {font_size}px;
      fill: none;
      stroke: black;
      stroke-width: {stroke_width};
      stroke-linecap: round;
    }}
  </style>
  <text x="{padding}" y="{line_height}">{text}</text>
</svg>"""


@dataclass(frozen=True)
class GlyphCanvas:
    """画布几何参数：全部由文字与字号推导，不单独存储。"""

    text: str
    font_size: float
    line_height: float
    stroke_width: float
    padding: float
    width: float
    height: float

    @classmethod
    def from_text(
        cls,
        text: str,
        font_size: float = FONT_SIZE,
        stroke_width: float = STROKE_WIDTH,
        padding: float = PADDING,
    ) -> "GlyphCanvas":
        """按单行等宽排布推导宽高；空字符串时宽度退化为 2*padding。"""

        if font_size <= 0:
            raise ValueError("font_size 必须为正数")
        if padding < 0 or stroke_width < 0:
            raise ValueError("padding 与 stroke_width 不能为负数")
        if _denoise(font_size) == 0 or (stroke_width > 0 and _denoise(stroke_width) == 0):
            raise ValueError("font_size 与 stroke_width 过小，输出时会被舍入为 0")
        line_height = _denoise(font_size * LINE_HEIGHT_RATIO)
        return cls(
            text=text,
            font_size=font_size,
            line_height=line_height,
            stroke_width=stroke_width,
            padding=padding,
            width=_denoise(len(text) * font_size + 2 * padding),
            height=_denoise(line_height + 2 * padding),
        )


def compose(text: str) -> str:
    """主入口：固定字号 48、描边 0.2、留白 20，返回 SVG 文档字符串。"""

    return render(GlyphCanvas.from_text(text))


def render(canvas: GlyphCanvas) -> str:
    """把任意画布套进模板；compose 只是默认参数下的特例。"""

    document = SVG_TEMPLATE.format(
        width=format_number(canvas.width),
        height=format_number(canvas.height),
        font_size=format_number(canvas.font_size),
        stroke_width=format_number(canvas.stroke_width),
        padding=format_number(canvas.padding),
        line_height=format_number(canvas.line_height),
        text=canvas.text,
    )
    logger.debug("生成 SVG：%d 个字符，画布 %s x %s", len(canvas.text), canvas.width, canvas.height)
    return document


def format_number(value: float) -> str:
    """整数输出为 "280"，其余输出最短小数形式，如 "97.6"。"""

    rounded = _denoise(value)
    if float(rounded).is_integer():
        return str(int(rounded))
    return repr(float(rounded))


def _denoise(value: float) -> float:
    """抹掉 48*1.2 这类浮点运算尾差；整数保持整数类型。"""

    if isinstance(value, int):
        return value
    return round(value, _NUMBER_DIGITS)
