"""host.py
==========
导出流程依赖的"宿主平台"能力集中在这里：
1. 临时引用 URL 的签发与回收（对应浏览器的 createObjectURL / revokeObjectURL）；
2. 下载链接的创建、挂载、触发与移除；
3. 阻塞式提示框与手动复制对话框。

导出调度器只面向 SaveHost 协议编程，测试时可以换成任意桩对象；
LocalSaveHost 是桌面端实现：临时 URL 就是私有临时文件的 file:// 地址，
触发链接即把 URL 指向的内容写入输出目录。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Protocol
from urllib.request import urlopen
import logging
import os
import tempfile

logger = logging.getLogger(__name__)


class HostError(RuntimeError):
    """宿主平台操作失败时抛出的统一异常。"""


@dataclass(frozen=True, eq=False)
class DownloadLink:
    """一次性下载链接：href 指向内容，filename 为建议保存的文件名。"""

    href: str
    filename: str


class SaveHost(Protocol):
    """导出调度器所需的最小平台接口。"""

    def create_object_url(self, payload: bytes, mime_type: str) -> str: ...

    def revoke_object_url(self, url: str) -> None: ...

    def create_link(self, href: str, filename: str) -> DownloadLink: ...

    def remove_link(self, link: DownloadLink) -> None: ...

    def click(self, link: DownloadLink) -> Path: ...

    def alert(self, message: str) -> None: ...

    def prompt(self, message: str, default: str) -> None: ...


def _log_alert(message: str) -> None:
    logger.warning("%s", message)


def _log_prompt(message: str, default: str) -> None:
    logger.warning("%s\n%s", message, default)


class LocalSaveHost:
    """桌面端宿主：临时文件充当临时 URL，链接触发后写入 output_dir。"""

    def __init__(
        self,
        output_dir: Path,
        alert: Optional[Callable[[str], None]] = None,
        prompt: Optional[Callable[[str, str], None]] = None,
    ) -> None:
        self.output_dir = Path(output_dir).expanduser()
        self._alert = alert or _log_alert
        self._prompt = prompt or _log_prompt
        self._object_urls: Dict[str, Path] = {}
        self._links: List[DownloadLink] = []

    # --- 临时引用 URL ---------------------------------------------------
    def create_object_url(self, payload: bytes, mime_type: str) -> str:
        """把内容落到私有临时文件，返回其 file:// 地址。"""

        fd, raw_path = tempfile.mkstemp(prefix="laser_etch_", suffix=_suffix_for(mime_type))
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        path = Path(raw_path)
        url = path.as_uri()
        self._object_urls[url] = path
        logger.debug("签发临时 URL %s（%d 字节，%s）", url, len(payload), mime_type)
        return url

    def revoke_object_url(self, url: str) -> None:
        """删除临时文件并注销 URL；未知 URL 直接忽略。"""

        path = self._object_urls.pop(url, None)
        if path is None:
            logger.debug("忽略未知的临时 URL：%s", url)
            return
        path.unlink(missing_ok=True)
        logger.debug("已回收临时 URL %s", url)

    @property
    def live_urls(self) -> List[str]:
        """尚未回收的临时 URL，正常情况下导出结束后应为空。"""

        return list(self._object_urls)

    # --- 下载链接 -------------------------------------------------------
    def create_link(self, href: str, filename: str) -> DownloadLink:
        link = DownloadLink(href=href, filename=filename)
        self._links.append(link)
        return link

    def remove_link(self, link: DownloadLink) -> None:
        if link in self._links:
            self._links.remove(link)

    @property
    def attached_links(self) -> List[DownloadLink]:
        return list(self._links)

    def click(self, link: DownloadLink) -> Path:
        """读取链接内容并保存到 output_dir/filename，返回写入路径。"""

        if link not in self._links:
            raise HostError(f"链接未挂载，无法触发：{link.filename}")
        with urlopen(link.href) as response:
            payload = response.read()
        self.output_dir.mkdir(parents=True, exist_ok=True)
        target = self.output_dir / link.filename
        target.write_bytes(payload)
        logger.info("SVG 已保存至 %s", target)
        return target

    # --- 提示 -----------------------------------------------------------
    def alert(self, message: str) -> None:
        self._alert(message)

    def prompt(self, message: str, default: str) -> None:
        self._prompt(message, default)


def _suffix_for(mime_type: str) -> str:
    return ".svg" if mime_type == "image/svg+xml" else ".bin"
