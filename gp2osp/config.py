"""配置模块。

默认配置文件: gp2osp.json （位于运行目录，可选）
优先级：命令行选项 > 配置文件 > DEFAULT_CONFIG
"""
from __future__ import annotations
import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .timetag import TimeInterval, make_interval
from .wanted import WantedMids, build_wanted

DEFAULT_PATH = "gp2osp.json"
DEFAULT_CONFIG = {
    "infile": "SLCLog.GP2",
    "outfile": "DATA.OSP",
    "fromdate": "01/01/2014",
    "todate": "31/12/2020",
    "fromtime": "00:00:00",
    "totime": "23:59:59",
    "wmsg": "RINEX",  # ALL, RINEX, RINEX,<list> 或 <list>
    "llevel": "INFO",
    "logfile": "LogFile.txt",
}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ConvertSettings:
    infile: str
    outfile: str
    interval: TimeInterval
    wanted: WantedMids


def load_config(path: str = DEFAULT_PATH) -> Dict[str, Any]:
    if not os.path.exists(path):
        return dict(DEFAULT_CONFIG)
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except ValueError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: top level must be an object")
    # 合并缺失字段
    for k, v in DEFAULT_CONFIG.items():
        data.setdefault(k, v)
    return data


def save_config(cfg: Dict[str, Any], path: str = DEFAULT_PATH):
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(cfg, f, indent=2, ensure_ascii=False)


def merge_options(cfg: Dict[str, Any], options: Mapping[str, Optional[str]]) -> Dict[str, Any]:
    """命令行中给出的选项（非 None）覆盖配置值。"""
    merged = dict(cfg)
    for k, v in options.items():
        if v is not None:
            merged[k] = v
    return merged


def resolve_settings(cfg: Mapping[str, Any]) -> ConvertSettings:
    interval = make_interval(cfg["fromdate"], cfg["fromtime"], cfg["todate"], cfg["totime"])
    if interval is None:
        raise ConfigError(
            "Incorrect From or To date or time option: "
            f"{cfg['fromdate']} {cfg['fromtime']} .. {cfg['todate']} {cfg['totime']}"
        )
    try:
        wanted = build_wanted(cfg["wmsg"])
    except ValueError as e:
        raise ConfigError(f"Incorrect wanted messages option: {e}") from e
    return ConvertSettings(
        infile=cfg["infile"],
        outfile=cfg["outfile"],
        interval=interval,
        wanted=wanted,
    )


__all__ = [
    "load_config", "save_config", "merge_options", "resolve_settings",
    "ConvertSettings", "ConfigError", "DEFAULT_CONFIG", "DEFAULT_PATH",
]
