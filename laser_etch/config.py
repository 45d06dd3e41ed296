"""config.py
===============
该模块集中负责配置文件的读写、默认值生成与错误处理，避免业务模块重复关注磁盘状态。
CLI 与 GUI 共享同一套配置逻辑；画布常量（字号/描边/留白）固定在 composer 中，不在此配置。
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

# 放在用户目录下，安装到只读的 site-packages 后依然可写
CONFIG_PATH = Path.home() / ".config" / "laser_etch" / "config.json"


class ConfigError(RuntimeError):
    """配置相关的统一异常，方便主流程捕获并做友好提示。"""


@dataclass(frozen=True)
class ConfigSnapshot:
    """简单的数据类包装，便于在 GUI 中展示当前的配置快照。"""

    data: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        """返回底层 dict 副本，防止调用方直接修改内部状态。"""
        return json.loads(json.dumps(self.data, ensure_ascii=False))


DEFAULT_CONFIG: Dict[str, Any] = {
    "text": {
        "default": "LASER",
    },
    "export": {
        "filename": "laser_etched_text.svg",
        "output_dir": "artifacts",
    },
    "gui": {
        "geometry": "720x560",
    },
}


def ensure_config_file(path: Path = CONFIG_PATH) -> Path:
    """若 config.json 不存在，则写入默认模板，确保后续读操作稳定。"""

    if not path.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(DEFAULT_CONFIG, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def load_config(path: Path = CONFIG_PATH) -> Dict[str, Any]:
    """加载配置，将缺失字段补齐默认值后返回 dict。"""

    try:
        ensure_config_file(path)
        user_cfg = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"无法解析配置文件 {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"配置文件不是 UTF-8 编码 {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"无法读写配置文件 {path}: {exc}") from exc
    if not isinstance(user_cfg, dict):
        raise ConfigError(f"配置文件顶层必须是对象：{path}")
    return _deep_merge(DEFAULT_CONFIG, user_cfg)


def save_config(data: Dict[str, Any], path: Path = CONFIG_PATH) -> None:
    """将配置写回磁盘；写入前做一次 JSON 序列化校验。"""

    try:
        serialized = json.dumps(data, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"配置数据无法序列化：{exc}") from exc
    try:
        path.write_text(serialized, encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"无法写入配置文件 {path}: {exc}") from exc


def update_config(partial: Dict[str, Any], path: Path = CONFIG_PATH) -> ConfigSnapshot:
    """深度合并新字段并保存，返回新的快照供调用方使用。"""

    config = load_config(path)
    merged = _deep_merge(config, partial)
    save_config(merged, path)
    return ConfigSnapshot(data=merged)


def _deep_merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """递归合并 dict，extra 优先；extra 中为 None 的字段沿用 base。"""

    result: Dict[str, Any] = {}
    for key in base.keys() | extra.keys():
        left = base.get(key)
        right = extra.get(key)
        if isinstance(left, dict) and isinstance(right, dict):
            result[key] = _deep_merge(left, right)
        elif right is None:
            result[key] = left
        else:
            result[key] = right
    return result


def snapshot(path: Path = CONFIG_PATH) -> ConfigSnapshot:
    """便捷函数：直接获取当前配置快照。"""

    return ConfigSnapshot(data=load_config(path))
