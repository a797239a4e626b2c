# -*- coding: utf-8 -*-
"""
单构型物理量（一维周期链）

    - chain_energy: E = -J Σ_i s_i s_{i+1}（周期边界，N=0 时为 0）
    - magnetization: 平均自旋 m = Σ s_i / N
    - flip_mask: 比较 sweep 前后构型，给出被翻转的格点

不做任何跨 sweep 的统计累积。
"""

from __future__ import annotations

from typing import Any

import numpy as np

__all__ = ["chain_energy", "magnetization", "flip_mask"]


def chain_energy(spins: Any, J: float = 1.0) -> float:
    """总能量（NOT divided by N）。N=1 时唯一的键连接格点自身。"""
    s = np.asarray(spins, dtype=np.int64).reshape(-1)
    if s.size == 0:
        return 0.0
    return -float(J) * float(np.sum(s * np.roll(s, -1)))


def magnetization(spins: Any) -> float:
    s = np.asarray(spins, dtype=np.int64).reshape(-1)
    if s.size == 0:
        return 0.0
    return float(np.sum(s)) / float(s.size)


def flip_mask(before: Any, after: Any) -> np.ndarray:
    """返回布尔数组：after[i] != before[i] 的格点为 True。"""
    a = np.asarray(before).reshape(-1)
    b = np.asarray(after).reshape(-1)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: before {a.shape} vs after {b.shape}")
    return a != b
