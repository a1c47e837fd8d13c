"""命令行入口：把 GP2 调试文件转换为 OSP 二进制文件。

用法示例：
    gp2osp -i SLCLog.GP2 -o DATA.OSP -w RINEX,4,41
    gp2osp -d 29/10/2014 -t 20:00:00 -D 29/10/2014 -T 21:00:00 -w ALL -l FINE

退出码：0 正常，1 参数/配置错误，2 无法打开输入文件，3 无法创建输出文件，4 写输出失败
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_CONFIG, DEFAULT_PATH, ConfigError, load_config, merge_options, resolve_settings
from .converter import extract_msgs, read_lines
from .logging_config import SEVERE, get_log_level, setup_logging

__version__ = "1.2.0"

EXIT_OK = 0
EXIT_ARGS = 1
EXIT_INPUT = 2
EXIT_OUTPUT = 3
EXIT_WRITE = 4

OPTION_KEYS = ("infile", "outfile", "fromdate", "todate", "fromtime", "totime", "wmsg", "llevel", "logfile")

logger = logging.getLogger(__name__)


class _ArgParser(argparse.ArgumentParser):
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_ARGS, f"{self.prog}: Argument error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    d = DEFAULT_CONFIG
    parser = _ArgParser(
        prog="gp2osp",
        description="Generates an OSP file from a GP2 data file containing SiRF IV receiver messages",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", default=DEFAULT_PATH,
                        help=f"JSON config file, used if present (default: {DEFAULT_PATH})")
    parser.add_argument("-i", "--infile", help=f"GP2 input file (default: {d['infile']})")
    parser.add_argument("-o", "--outfile", help=f"OSP binary output file (default: {d['outfile']})")
    parser.add_argument("-d", "--fromdate", help=f"From date dd/mm/yyyy (default: {d['fromdate']})")
    parser.add_argument("-D", "--todate", help=f"To date dd/mm/yyyy (default: {d['todate']})")
    parser.add_argument("-t", "--fromtime", help=f"From time hh:mm:ss (default: {d['fromtime']})")
    parser.add_argument("-T", "--totime", help=f"To time hh:mm:ss (default: {d['totime']})")
    parser.add_argument("-w", "--wmsg",
                        help=f"Wanted messages MIDs: a comma separated list, ALL, RINEX, or RINEX,list "
                             f"(default: {d['wmsg']})")
    parser.add_argument("-l", "--llevel",
                        help="Maximum level to log: SEVERE, WARNING, INFO, CONFIG, FINE, FINER, FINEST "
                             f"(default: {d['llevel']})")
    parser.add_argument("--logfile", help=f"Log file, empty to disable (default: {d['logfile']})")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    try:
        cfg = load_config(args.config)
    except (OSError, ConfigError) as e:
        print(f"gp2osp: {e}", file=sys.stderr)
        return EXIT_ARGS
    cfg = merge_options(cfg, {k: getattr(args, k) for k in OPTION_KEYS})
    try:
        level = get_log_level(cfg["llevel"])
    except ValueError as e:
        print(f"gp2osp: Argument error: {e}", file=sys.stderr)
        return EXIT_ARGS
    setup_logging(level, cfg["logfile"] or None)

    logger.info(f"gp2osp V{__version__} START")
    logger.info("Options: " + " ".join(f"{k}={cfg[k]}" for k in OPTION_KEYS))
    try:
        settings = resolve_settings(cfg)
    except ConfigError as e:
        logger.log(SEVERE, str(e))
        return EXIT_ARGS
    logger.info(f"MID messages to OSP: {settings.wanted.describe()}")

    try:
        src = open(settings.infile, 'r', encoding='ascii', errors='replace')
    except OSError as e:
        logger.log(SEVERE, f"Cannot open input file {settings.infile}: {e}")
        return EXIT_INPUT
    with src:
        try:
            # 不缓冲：每条记录的写入失败立即可见
            out = open(settings.outfile, 'wb', buffering=0)
        except OSError as e:
            logger.log(SEVERE, f"Cannot create output file {settings.outfile}: {e}")
            return EXIT_OUTPUT
        with out:
            result = extract_msgs(read_lines(src), settings.interval, settings.wanted, out)

    logger.info(f"End of data extraction. Messages extracted: {result.messages}")
    if result.mid_stats:
        logger.info("Messages per MID: " + " ".join(f"{m}:{n}" for m, n in result.snapshot_mids()))
    if result.rejected:
        logger.info("Lines skipped: " + ", ".join(f"{r.value}={n}" for r, n in result.rejected.items()))
    if result.write_failed:
        return EXIT_WRITE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
