# -*- coding: utf-8 -*-
"""
Ising Chain Metropolis Sweep
============================

一维周期 Ising 链的单次 Metropolis sweep 内核。

主要功能
--------
- 同步 Metropolis sweep（所有判据读取 sweep 前快照）
- 随机选址的顺序 sweep
- 可插拔的均匀随机源（numpy Generator 或任意 ``random()`` 对象）
- 单构型能量 / 磁化
- 日志与配置工具

快速开始
--------
>>> import ising_chain as ic
>>> from ising_chain.core.algorithms import metropolis_sweep, make_generator
>>> out = metropolis_sweep(0.5, 1.0, [1, -1, 1, 1], rng=make_generator(42))

模块组织
--------
- core: 核心算法与物理量
- utils: 日志与配置工具
"""

# ising_chain/__init__.py
from importlib import import_module
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from typing import TYPE_CHECKING

try:
    __version__ = _pkg_version("ising-chain")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "core",
    "utils",
    "__version__",
]

_lazy_subpackages = {
    "core": ".core",
    "utils": ".utils",
}

def __getattr__(name: str):
    if name in _lazy_subpackages:
        mod = import_module(_lazy_subpackages[name], __name__)
        globals()[name] = mod  # cache
        return mod
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

def __dir__():
    return sorted(list(__all__))

if TYPE_CHECKING:  # for IDE/static type checkers only
    from . import core, utils
