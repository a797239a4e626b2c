# -*- coding: utf-8 -*-
"""
核心算法模块
============

一维周期 Ising 链的 Metropolis sweep 与单构型物理量。

子模块
------
- algorithms: 同步 / 随机选址 Metropolis sweep（Numba JIT）
- observables: 能量、磁化、翻转掩码

示例
----
>>> from ising_chain.core.algorithms import apply_move
>>> spins = [1, 1, -1, 1, -1, -1]
>>> new_spins, info = apply_move(spins, beta=0.5, J=1.0, replica_seed=42)
>>> print(new_spins, info.accepted)
"""


# ising_chain/core/__init__.py
from importlib import import_module
from typing import TYPE_CHECKING

__all__ = ["algorithms", "observables"]

_lazy = {
    "algorithms": ".algorithms",
    "observables": ".observables",
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
    from . import algorithms, observables
