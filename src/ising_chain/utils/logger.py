# -*- coding: utf-8 -*-
"""
日志记录器

    - 控制台：stdout，仅在真实终端上给 levelname 着色
    - 文件：可选；``rotate`` 为 None 时普通追加，``{'maxBytes':..}`` 按大小轮转，
      ``{'when':..}`` 按时间轮转
    - setup_from_config(cfg)：直接读取 Config 的 log_level / log_file / log_rotate / log_utc

库内模块只使用 ``logging.getLogger(__name__)``，不自行配置 handler。
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler

__all__ = ['setup_logger', 'setup_from_config', 'get_logger', 'ColoredFormatter']

_DATEFMT = '%Y-%m-%d %H:%M:%S'
_CONSOLE_FMT = '%(asctime)s | %(levelname)-8s | %(message)s'
_FILE_FMT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'


class ColoredFormatter(logging.Formatter):
    """在格式化副本上给 levelname 加 ANSI 颜色，原 record 不变。"""

    LEVEL_COLORS = {
        logging.DEBUG: '36',
        logging.INFO: '32',
        logging.WARNING: '33',
        logging.ERROR: '31',
        logging.CRITICAL: '35',
    }

    def format(self, record: logging.LogRecord) -> str:
        code = self.LEVEL_COLORS.get(record.levelno)
        if code is None:
            return super().format(record)
        tinted = logging.makeLogRecord(record.__dict__)
        tinted.levelname = f"\033[{code}m{record.levelname}\033[0m"
        return super().format(tinted)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def _formatter(fmt: str, color: bool, utc: bool) -> logging.Formatter:
    formatter = (ColoredFormatter if color else logging.Formatter)(fmt, datefmt=_DATEFMT)
    if utc:
        formatter.converter = time.gmtime  # type: ignore
    return formatter


def _open_file_handler(path: Path, rotate: Optional[Dict[str, Any]], utc: bool) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = dict(rotate or {})
    if not opts:
        return logging.FileHandler(str(path), mode='a', encoding='utf-8')
    if 'when' in opts:
        return TimedRotatingFileHandler(
            str(path),
            when=opts['when'],
            interval=int(opts.get('interval', 1)),
            backupCount=int(opts.get('backupCount', 7)),
            encoding='utf-8',
            utc=utc,
        )
    return RotatingFileHandler(
        str(path),
        maxBytes=int(opts.get('maxBytes', 1_000_000)),
        backupCount=int(opts.get('backupCount', 3)),
        encoding='utf-8',
    )


def setup_logger(
    name: str = 'ising_chain',
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    use_color: bool = True,
    utc: bool = False,
    rotate: Optional[Dict[str, Any]] = None,
) -> logging.Logger:
    """
    配置并返回 logger；重复调用会关闭并替换同名 logger 的 handlers。
    level 可为 int 或 'DEBUG'/'INFO' 等字符串，未知名称抛 ValueError。
    """
    lvl = _resolve_level(level)
    logger = logging.getLogger(name)
    logger.setLevel(lvl)
    logger.propagate = False
    while logger.handlers:
        old = logger.handlers[0]
        logger.removeHandler(old)
        old.close()

    color = bool(use_color) and getattr(sys.stdout, 'isatty', lambda: False)()
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(lvl)
    console.setFormatter(_formatter(_CONSOLE_FMT, color, utc))
    logger.addHandler(console)

    if log_file:
        fh = _open_file_handler(Path(log_file), rotate, utc)
        fh.setLevel(logging.DEBUG)  # logger.level controls emission
        fh.setFormatter(_formatter(_FILE_FMT, False, utc))
        logger.addHandler(fh)
    return logger


def setup_from_config(cfg: Any, name: str = 'ising_chain') -> logging.Logger:
    """按 Config 的日志字段配置 logger。"""
    return setup_logger(
        name,
        level=cfg.log_level,
        log_file=cfg.log_file,
        utc=cfg.log_utc,
        rotate=cfg.log_rotate,
    )


def get_logger(name: str = 'ising_chain') -> logging.Logger:
    """获取 logger（若未 setup，返回同名 logger 对象，但不自动配置 handlers）。"""
    return logging.getLogger(name)
