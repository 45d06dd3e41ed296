"""gui.py
==========
该模块提供一个朴素的 tkinter 窗口，扮演"界面协作者"的角色：
1. 输入框（默认 LASER）+ 「生成」按钮 -> 调用 composer 并保存当前文档；
2. 「下载 SVG」按钮 -> 调用 exporter，文档生成之前保持禁用；
3. 可滚动的源码查看区与运行日志区。
当前文字与当前文档都是窗口实例上的普通属性，核心模块本身不持有状态。
"""

from __future__ import annotations

import tkinter as tk
from tkinter import filedialog, messagebox, ttk
from pathlib import Path
from typing import Dict, Optional

from .composer import compose
from .config import CONFIG_PATH, ConfigError, load_config, update_config
from .exporter import ExportOutcome, ExportStatus, export_document
from .host import LocalSaveHost


class LaserEtchApp(tk.Tk):
    """主窗口，负责构建输入区、按钮区、源码区与日志区。"""

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        super().__init__()
        self.config_path = config_path
        self.config_data: Dict = load_config(config_path)
        self.title("Laser Font Generator (200µm)")
        self.geometry(self.config_data["gui"]["geometry"])
        self.resizable(True, True)
        self.document: Optional[str] = None
        self._build_layout()

    # --- 布局 ---------------------------------------------------------
    def _build_layout(self) -> None:
        container = ttk.Frame(self)
        container.pack(fill=tk.BOTH, expand=True, padx=12, pady=12)

        input_row = ttk.Frame(container)
        input_row.pack(fill=tk.X)
        self.text_var = tk.StringVar(value=self.config_data["text"]["default"])
        entry = ttk.Entry(input_row, textvariable=self.text_var)
        entry.pack(side=tk.LEFT, fill=tk.X, expand=True)
        entry.bind("<Return>", lambda _: self.generate())
        ttk.Button(input_row, text="生成", command=self.generate).pack(side=tk.RIGHT, padx=(8, 0))

        self.output_var = tk.StringVar(value=self.config_data["export"]["output_dir"])
        self._add_path_field(container, "保存目录", self.output_var)

        self.download_button = ttk.Button(
            container, text="下载 SVG", command=self.download, state=tk.DISABLED
        )
        self.download_button.pack(fill=tk.X, pady=(4, 8))

        source_frame = ttk.LabelFrame(container, text="SVG 源码")
        source_frame.pack(fill=tk.BOTH, expand=True)
        self.source_text = tk.Text(source_frame, height=10, wrap=tk.CHAR, state=tk.DISABLED)
        self.source_text.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        scrollbar = ttk.Scrollbar(source_frame, command=self.source_text.yview)
        self.source_text.configure(yscrollcommand=scrollbar.set)
        scrollbar.pack(side=tk.RIGHT, fill=tk.Y)

        log_frame = ttk.LabelFrame(container, text="运行日志")
        log_frame.pack(fill=tk.BOTH, expand=False, pady=(8, 0))
        self.log_text = tk.Text(log_frame, height=6, wrap=tk.WORD)
        self.log_text.pack(fill=tk.BOTH, expand=True)

    # --- 日志 ---------------------------------------------------------
    def log(self, message: str) -> None:
        self.log_text.insert(tk.END, message + "\n")
        self.log_text.see(tk.END)

    # --- 动作 ---------------------------------------------------------
    def generate(self) -> None:
        """生成新文档并替换旧文档，同时刷新源码区、启用下载按钮。"""

        self.document = compose(self.text_var.get())
        self.source_text.configure(state=tk.NORMAL)
        self.source_text.delete("1.0", tk.END)
        self.source_text.insert("1.0", self.document)
        self.source_text.configure(state=tk.DISABLED)
        self.download_button.configure(state=tk.NORMAL)
        self.log(f"[已生成] {len(self.text_var.get())} 个字符")

    def download(self) -> None:
        output_dir = Path(self.output_var.get().strip() or self.config_data["export"]["output_dir"])
        host = LocalSaveHost(
            output_dir,
            alert=lambda message: messagebox.showwarning("提示", message, parent=self),
            prompt=self._show_copy_dialog,
        )
        outcome = export_document(self.document, host, filename=self.config_data["export"]["filename"])
        self._report(outcome)

    def _report(self, outcome: ExportOutcome) -> None:
        for error in outcome.errors:
            self.log(f"[{type(error).__name__}] {error}")
        if outcome.status is ExportStatus.MISSING_DOCUMENT:
            return
        if outcome.saved:
            self.log(f"[导出完成] {outcome.status.value} -> {outcome.saved_path}")
        else:
            self.log("[导出失败] 已弹出手动复制窗口")

    def _show_copy_dialog(self, message: str, document: str) -> None:
        """阻塞式对话框：展示完整文档并提供一键复制。"""

        window = tk.Toplevel(self)
        window.title("手动复制 SVG")
        window.transient(self)
        ttk.Label(window, text=message).pack(anchor=tk.W, padx=8, pady=(8, 4))
        text_widget = tk.Text(window, height=16, wrap=tk.CHAR)
        text_widget.insert("1.0", document)
        text_widget.tag_add(tk.SEL, "1.0", tk.END)
        text_widget.pack(fill=tk.BOTH, expand=True, padx=8)
        text_widget.focus_set()

        def copy_all() -> None:
            self.clipboard_clear()
            self.clipboard_append(document)
            self.log("[已复制] SVG 源码已放入剪贴板")

        action_bar = ttk.Frame(window)
        action_bar.pack(fill=tk.X, padx=8, pady=8)
        ttk.Button(action_bar, text="复制", command=copy_all).pack(side=tk.LEFT)
        ttk.Button(action_bar, text="关闭", command=window.destroy).pack(side=tk.RIGHT)
        window.grab_set()
        self.wait_window(window)

    # --- 通用控件 -----------------------------------------------------
    def _add_path_field(self, parent: tk.Misc, label: str, var: tk.StringVar) -> None:
        frame = ttk.Frame(parent)
        frame.pack(fill=tk.X, pady=(8, 4))
        ttk.Label(frame, text=label).pack(anchor=tk.W)
        ttk.Entry(frame, textvariable=var).pack(side=tk.LEFT, fill=tk.X, expand=True)

        def choose() -> None:
            path = filedialog.askdirectory(**self._dialog_defaults(var.get().strip()))
            if not path:
                return
            var.set(path)
            try:
                self.config_data = update_config({"export": {"output_dir": path}}, self.config_path).to_dict()
            except ConfigError as exc:
                messagebox.showerror("保存失败", str(exc), parent=self)
                self.log(f"[配置保存失败] {exc}")
                return
            self.log(f"[配置已更新] 保存目录 -> {path}")

        ttk.Button(frame, text="浏览", command=choose).pack(side=tk.RIGHT, padx=4)

    def _dialog_defaults(self, path_hint: str) -> Dict[str, str]:
        """根据当前输入推断目录对话框的初始目录。"""

        if not path_hint:
            return {}
        candidate = Path(path_hint).expanduser()
        return {"initialdir": str(candidate if candidate.is_dir() else candidate.parent)}


def launch(config_path: Path = CONFIG_PATH) -> None:
    app = LaserEtchApp(config_path)
    app.mainloop()
