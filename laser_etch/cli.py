"""cli.py
==========
命令行入口，提供三个子命令：
- compose：把文字生成 SVG，打印到标准输出或写入文件；
- export：生成后走完整的导出降级链，保存为 laser_etched_text.svg；
- gui：启动 tkinter 窗口。
默认值统一读取 config.json，CLI 只覆盖用户显式传入的部分。"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from .composer import compose
from .config import CONFIG_PATH, ConfigError, load_config
from .exporter import ExportStatus, export_document
from .host import LocalSaveHost

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """构造顶级命令解析器。"""

    parser = argparse.ArgumentParser(prog="laser-etch", description="激光刻字 SVG 生成器 CLI")
    parser.add_argument("--verbose", action="store_true", help="输出调试日志，便于排查导出细节")
    parser.add_argument("--config", type=Path, default=CONFIG_PATH, help="配置文件路径，默认使用 ~/.config/laser_etch/config.json")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compose_parser = subparsers.add_parser("compose", help="将文字生成为 SVG 文档")
    _add_text_arguments(compose_parser)
    compose_parser.add_argument("--output", type=Path, help="写入的 SVG 路径；缺省时打印到标准输出")

    export_parser = subparsers.add_parser("export", help="生成 SVG 并保存为本地文件")
    _add_text_arguments(export_parser)
    export_parser.add_argument("--output-dir", type=Path, help="保存目录，默认读取 config.export.output_dir")

    subparsers.add_parser("gui", help="启动图形界面")
    return parser


def _add_text_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--text", help="直接输入要刻的文字，缺省读取 config.text.default")
    group.add_argument("--text-file", type=Path, help="从文本文件读取内容（去掉末尾换行）")


def main(argv: Optional[Iterable[str]] = None) -> int:
    """程序入口：解析参数 -> 调用对应子命令，返回进程退出码。"""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )

    try:
        config = load_config(args.config)
        if args.command == "compose":
            return _handle_compose(args, config)
        if args.command == "export":
            return _handle_export(args, config)
        if args.command == "gui":
            from .gui import launch

            launch(args.config)
            return 0
    except ConfigError as exc:
        logger.error("%s", exc)
        return 2
    parser.error("未知命令")  # pragma: no cover - 理论上不会走到
    return 2  # pragma: no cover


def _handle_compose(args: argparse.Namespace, config: dict) -> int:
    """处理 compose 子命令：输出到文件或标准输出。"""

    document = compose(_load_text(args, config))
    if args.output is None:
        sys.stdout.write(document + "\n")
        return 0
    output = args.output.expanduser()
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(document, encoding="utf-8")
    except OSError as exc:
        logger.error("无法写入 %s: %s", output, exc)
        return 1
    logger.info("SVG 已写入 %s", output)
    return 0


def _handle_export(args: argparse.Namespace, config: dict) -> int:
    """处理 export 子命令：手动复制时把文档打印到标准输出。"""

    export_cfg = config["export"]
    output_dir = args.output_dir or Path(export_cfg["output_dir"])
    host = LocalSaveHost(output_dir, alert=_print_alert, prompt=_print_prompt)
    outcome = export_document(compose(_load_text(args, config)), host, filename=export_cfg["filename"])
    if outcome.status is ExportStatus.MANUAL_COPY:
        return 1
    logger.info("导出完成（%s）-> %s", outcome.status.value, outcome.saved_path)
    return 0


def _load_text(args: argparse.Namespace, config: dict) -> str:
    """优先使用 --text，其次读取 --text-file，最后回落到配置默认值。"""

    if args.text is not None:
        return args.text
    if args.text_file:
        try:
            return args.text_file.read_text(encoding="utf-8").rstrip("\r\n")
        except OSError as exc:
            raise ConfigError(f"无法读取文本文件 {args.text_file}: {exc}") from exc
    return config["text"]["default"]


def _print_alert(message: str) -> None:
    print(message, file=sys.stderr)


def _print_prompt(message: str, document: str) -> None:
    print(message, file=sys.stderr)
    sys.stdout.write(document + "\n")
