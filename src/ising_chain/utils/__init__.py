# -*- coding: utf-8 -*-
"""
工具层
======

提供日志配置与配置管理。

子模块
------
- logger: 日志工具
- config: sweep 参数配置

示例
----
>>> from ising_chain.utils.logger import setup_logger
>>> from ising_chain.utils.config import from_args
>>> logger = setup_logger('ising_chain', level=logging.DEBUG)
>>> cfg = from_args(['--set', 'sweep.beta=0.8'])
"""


# ising_chain/utils/__init__.py
from importlib import import_module
from typing import TYPE_CHECKING

__all__ = ["logger", "config"]

_lazy = {
    "logger": ".logger",
    "config": ".config",
}

def __getattr__(name: str):
    if name in _lazy:
        mod = import_module(_lazy[name], __name__)
        globals()[name] = mod
        return mod
    raise AttributeError(f"{__name__} has no attribute {name!r}")

def __dir__():
    return sorted(list(__all__))

if TYPE_CHECKING:
    from . import logger, config
