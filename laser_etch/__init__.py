"""laser_etch
=================
该包聚合了激光刻字 SVG 工具的核心模块：
1. SVG 生成（composer）
2. 本地文件导出与降级链（exporter / host）
3. argparse CLI 与 tkinter GUI 壳子
"""

from __future__ import annotations

from .composer import GlyphCanvas, compose, render
from .exporter import ExportOutcome, ExportStatus, export_document

__all__ = [
    "__version__",
    "GlyphCanvas",
    "compose",
    "render",
    "ExportOutcome",
    "ExportStatus",
    "export_document",
]

__version__ = "0.1.0"
