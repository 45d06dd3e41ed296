"""exporter.py
===============
该模块负责把已生成的 SVG 文档保存为本地文件，按固定顺序逐级降级：
1. 临时 URL 方案：内容交给宿主签发临时引用，创建下载链接并触发，最后释放链接与 URL；
2. data URI 方案：第一级抛异常时，把文档百分号编码成内联 data URI 再触发一次；
3. 手动复制：两级都失败时，把原始文档交给宿主的阻塞式对话框，由用户自行复制。

实现约定：
- 每一级都是独立的尝试函数，调度器按顺序执行，首个成功即停止；
- 所有失败都只记录日志并写入 ExportOutcome，绝不向调用方抛出；
- 临时 URL 由本次调用独占，无论成功还是异常都在 finally 中回收。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Type
from urllib.parse import quote
import logging

from .host import SaveHost

logger = logging.getLogger(__name__)

DOWNLOAD_FILENAME = "laser_etched_text.svg"
SVG_MIME_TYPE = "image/svg+xml"
MISSING_DOCUMENT_MESSAGE = "Generate an SVG first"
MANUAL_COPY_MESSAGE = "Unable to download automatically. Copy SVG:"
# 与 encodeURIComponent 保持一致：字母数字与 -_.~ 由 quote 默认保留，这里补上 !*'()
_URI_COMPONENT_SAFE = "!*'()"


class ExportError(RuntimeError):
    """导出流程中各类失败的公共基类。"""


class MissingDocument(ExportError):
    """尚未生成文档就尝试导出。"""


class PrimaryExportFailure(ExportError):
    """临时 URL 方案失败，将降级到 data URI。"""


class FallbackExportFailure(ExportError):
    """data URI 方案也失败，将进入手动复制。"""


class ExportStatus(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"
    MANUAL_COPY = "manual_copy"
    MISSING_DOCUMENT = "missing_document"


AttemptFunc = Callable[[str, SaveHost, str], Path]


@dataclass(frozen=True)
class ExportStrategy:
    """单级导出策略：name 用于日志，failure 是失败时包装成的异常类型。"""

    name: str
    status: ExportStatus
    attempt: AttemptFunc
    failure: Type[ExportError]


@dataclass(frozen=True)
class ExportOutcome:
    """一次导出的结果快照，便于 CLI 打印或 GUI 写入日志。"""

    status: ExportStatus
    saved_path: Optional[Path] = None
    attempts: Tuple[str, ...] = ()
    errors: Tuple[ExportError, ...] = ()

    @property
    def saved(self) -> bool:
        return self.saved_path is not None


def save_via_object_url(document: str, host: SaveHost, filename: str) -> Path:
    """第一级：临时 URL + 下载链接；链接与 URL 在所有退出路径上都会被释放。"""

    url = host.create_object_url(document.encode("utf-8"), SVG_MIME_TYPE)
    try:
        link = host.create_link(url, filename)
        try:
            return host.click(link)
        finally:
            host.remove_link(link)
    finally:
        host.revoke_object_url(url)


def save_via_data_uri(document: str, host: SaveHost, filename: str) -> Path:
    """第二级：内联 data URI，无需回收，仅移除链接。"""

    link = host.create_link(to_data_uri(document), filename)
    try:
        return host.click(link)
    finally:
        host.remove_link(link)


def to_data_uri(document: str) -> str:
    """按 encodeURIComponent 规则编码文档，拼成 image/svg+xml 的 data URI。"""

    return f"data:{SVG_MIME_TYPE};utf8,{quote(document, safe=_URI_COMPONENT_SAFE)}"


DEFAULT_STRATEGIES: Tuple[ExportStrategy, ...] = (
    ExportStrategy("object-url", ExportStatus.PRIMARY, save_via_object_url, PrimaryExportFailure),
    ExportStrategy("data-uri", ExportStatus.FALLBACK, save_via_data_uri, FallbackExportFailure),
)


def export_document(
    document: Optional[str],
    host: SaveHost,
    strategies: Sequence[ExportStrategy] = DEFAULT_STRATEGIES,
    filename: str = DOWNLOAD_FILENAME,
) -> ExportOutcome:
    """主入口：依次尝试各级策略，全部失败时进入手动复制。"""

    if not document:
        error = MissingDocument(MISSING_DOCUMENT_MESSAGE)
        logger.warning("导出被拒绝：%s", error)
        errors: List[ExportError] = [error]
        try:
            host.alert(MISSING_DOCUMENT_MESSAGE)
        except Exception as exc:
            logger.exception("提示框无法弹出")
            errors.append(ExportError(f"alert 失败：{exc}"))
        return ExportOutcome(status=ExportStatus.MISSING_DOCUMENT, errors=tuple(errors))

    attempts: List[str] = []
    errors = []
    for strategy in strategies:
        attempts.append(strategy.name)
        try:
            saved_path = strategy.attempt(document, host, filename)
        except Exception as exc:
            wrapped = strategy.failure(f"{strategy.name} 导出失败：{exc}")
            wrapped.__cause__ = exc
            logger.error("%s", wrapped, exc_info=exc)
            errors.append(wrapped)
            continue
        logger.info("通过 %s 方案导出：%s", strategy.name, saved_path)
        return ExportOutcome(
            status=strategy.status,
            saved_path=saved_path,
            attempts=tuple(attempts),
            errors=tuple(errors),
        )

    attempts.append("manual-copy")
    try:
        host.prompt(MANUAL_COPY_MESSAGE, document)
    except Exception as exc:
        logger.exception("手动复制对话框无法弹出")
        errors.append(ExportError(f"manual-copy 失败：{exc}"))
    return ExportOutcome(
        status=ExportStatus.MANUAL_COPY,
        attempts=tuple(attempts),
        errors=tuple(errors),
    )
