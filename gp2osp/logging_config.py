"""日志配置。

沿用原工具的级别名：SEVERE, WARNING, INFO, CONFIG, FINE, FINER, FINEST。
日志同时输出到控制台(stderr)和日志文件（默认 LogFile.txt，追加写入）。
"""
from __future__ import annotations

import logging
import sys
from typing import Optional

SEVERE = logging.ERROR
CONFIG = 15
FINE = logging.DEBUG
FINER = 7
FINEST = 5

LEVELS = {
    "SEVERE": SEVERE,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "CONFIG": CONFIG,
    "FINE": FINE,
    "FINER": FINER,
    "FINEST": FINEST,
}

LOG_FORMAT = '%(asctime)s [%(levelname)-7s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_FILE = "LogFile.txt"

for _name in ("SEVERE", "CONFIG", "FINE", "FINER", "FINEST"):
    logging.addLevelName(LEVELS[_name], _name)


def get_log_level(name: str) -> int:
    """级别名 -> 数值。也接受 Python 标准名 (DEBUG/ERROR/CRITICAL)。"""
    key = name.strip().upper()
    if key in LEVELS:
        return LEVELS[key]
    if key in ("DEBUG", "ERROR", "CRITICAL"):
        return getattr(logging, key)
    raise ValueError(f"Unknown log level: {name}")


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[str] = DEFAULT_LOG_FILE,
                  quiet: bool = False) -> logging.Logger:
    """配置 gp2osp 包的 logger，返回该 logger。"""
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    root_logger = logging.getLogger('gp2osp')
    root_logger.setLevel(level)
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)
        h.close()

    if not quiet:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(formatter)
        root_logger.addHandler(console)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        except OSError as e:
            print(f"Warning: Could not open log file {log_file}: {e}", file=sys.stderr)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
    return root_logger


__all__ = [
    "SEVERE", "CONFIG", "FINE", "FINER", "FINEST", "LEVELS",
    "get_log_level", "setup_logging",
]
