# -*- coding: utf-8 -*-
"""
    一维周期 Ising 链的单次 Metropolis sweep（CPU / Numba 实现）

    所有随机性通过显式传入的均匀随机源（``numpy.random.Generator`` 或任意提供
``random()`` 的对象）或 ``replica_seed`` 控制，便于复现与边界测试。

支持算法：
    - ``metropolis_sweep``: 同步（simultaneous）更新，所有判据读取 sweep 前快照
    - ``random_site``: 随机选址的顺序更新，后续尝试可见先前翻转

实现要点：
    - 输入从不被原地修改；结果写入独立的输出缓冲区
    - 每个格点恰好一个接受随机数（u_acc[i] 对应格点 i），ΔE < 0 时忽略该随机数
    - 内核不做任何参数校验，也不抛异常；非有限 beta/J 按浮点规则传播
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Union

import logging
import math
import warnings

import numpy as np
from numba import njit
from numpy.random import Generator, Philox

logger = logging.getLogger(__name__)

MoveMeta = Dict[str, Any]


class UniformSource(Protocol):
    """均匀随机源：``random()`` 返回 [0, 1) 内的浮点数。"""

    def random(self) -> float:
        ...


# 也接受零参可调用对象（每次调用返回一个 [0,1) 均匀数）
RandomSource = Union[UniformSource, Callable[[], float]]


# -----------------------
# 随机种子 / Generator 辅助
# -----------------------
def _seed32(seed: Optional[int]) -> int:
    """
    将任意整数截断为 32-bit 无符号整数。
    若 seed 为 None 则抛出 ValueError（调用方应拒绝 None）。
    """
    if seed is None:
        raise ValueError("seed must be an integer (not None)")
    try:
        s = int(seed)
    except (TypeError, ValueError):
        raise ValueError("seed must be convertible to int")
    return s & 0xFFFFFFFF


def make_generator(seed: Optional[int]) -> Generator:
    """根据整数种子构造基于 Philox 的 numpy.random.Generator。"""
    return Generator(Philox(_seed32(seed)))


def _draw_uniform(source: Any, n: int) -> np.ndarray:
    """
    从随机源取 n 个 [0,1) 均匀数（按格点顺序）。
    Generator 走向量化路径；其它对象逐个调用 ``random()``；零参可调用对象亦可。
    """
    if n <= 0:
        return np.empty(0, dtype=np.float64)
    if isinstance(source, Generator):
        return source.random(n)
    draw = getattr(source, "random", None)
    if draw is None:
        draw = source
    return np.fromiter((float(draw()) for _ in range(n)), dtype=np.float64, count=n)


def _rng_model(source: Any) -> str:
    bg = getattr(source, "bit_generator", None)
    if bg is not None:
        return type(bg).__name__
    return type(source).__name__


# -----------------------
# 能量变化（NumPy 向量化）
# -----------------------
def delta_energy(spins: Any, J: float) -> np.ndarray:
    """
    每个格点翻转的能量变化 ΔE_i = 2 J s_i (s_{i+1} + s_{i-1})，周期边界。
    N=1 时左右邻居均为自身；N=2 时另一格点被计两次。
    """
    s = np.asarray(spins, dtype=np.int64)
    if s.size == 0:
        return np.empty(0, dtype=np.float64)
    neigh = np.roll(s, -1) + np.roll(s, 1)
    with np.errstate(over="ignore", invalid="ignore"):
        return 2.0 * float(J) * (s * neigh).astype(np.float64)


# -----------------------
# JIT 内核
# -----------------------
@njit(cache=True)
def _metropolis_chain_sweep_jit(
    u_acc: np.ndarray, spins: np.ndarray, beta: float, J: float
) -> Tuple[np.ndarray, int]:
    """
    同步 Metropolis：判据只读 spins（快照），翻转写入 out。
    返回 (out, accepts)
    """
    n = spins.shape[0]
    out = spins.copy()
    accepts = 0
    for i in range(n):
        s = spins[i]
        right = spins[(i + 1) % n]
        left = spins[(i + n - 1) % n]
        dE = 2.0 * J * s * (right + left)
        # 接受判据：dE<0 或 u < exp(-β dE)
        if dE < 0.0 or u_acc[i] < math.exp(-beta * dE):
            out[i] = -s
            accepts += 1
    return out, accepts


@njit(cache=True)
def _random_site_sweep_jit(
    u_site: np.ndarray, u_acc: np.ndarray, spins: np.ndarray, beta: float, J: float
) -> Tuple[np.ndarray, int]:
    """
    随机选址顺序更新：第 k 次尝试选 floor(u_site[k]*n)，在工作副本上求 ΔE。
    返回 (work, accepts)
    """
    n = spins.shape[0]
    work = spins.copy()
    accepts = 0
    for k in range(n):
        i = int(u_site[k] * n)
        if i >= n:
            i = n - 1
        s = work[i]
        dE = 2.0 * J * s * (work[(i + 1) % n] + work[(i + n - 1) % n])
        if dE < 0.0 or u_acc[k] < math.exp(-beta * dE):
            work[i] = -s
            accepts += 1
    return work, accepts


# -----------------------
# wrapper: (spins, beta, J, rng) -> (spins_out, meta)
# -----------------------
def _metropolis_sweep_impl(
    spins: np.ndarray, beta: float, J: float, rng: Any
) -> Tuple[np.ndarray, MoveMeta]:
    n = int(spins.shape[0])
    if n == 0:
        return spins.copy(), {"accepted": 0, "attempts": 0, "rng_consumed": 0}
    u_acc = _draw_uniform(rng, n)
    out, accepts = _metropolis_chain_sweep_jit(u_acc, spins, float(beta), float(J))
    return out, {"accepted": int(accepts), "attempts": n, "rng_consumed": n}


def _random_site_sweep_impl(
    spins: np.ndarray, beta: float, J: float, rng: Any
) -> Tuple[np.ndarray, MoveMeta]:
    n = int(spins.shape[0])
    if n == 0:
        return spins.copy(), {"accepted": 0, "attempts": 0, "rng_consumed": 0}
    u_site = _draw_uniform(rng, n)
    u_acc = _draw_uniform(rng, n)
    out, accepts = _random_site_sweep_jit(u_site, u_acc, spins, float(beta), float(J))
    return out, {"accepted": int(accepts), "attempts": n, "rng_consumed": 2 * n}


def _as_chain(spins: Any) -> np.ndarray:
    return np.ascontiguousarray(np.asarray(spins, dtype=np.int32).reshape(-1))


def metropolis_sweep(beta: float, J: float, spins: Any, rng: Optional[RandomSource] = None) -> np.ndarray:
    """
    对一维周期链执行一次同步 Metropolis sweep，返回新的 int32 数组。

    参数：
      - beta: 逆温度（任意实数，不校验）
      - J: 耦合常数（J>0 铁磁，J<0 反铁磁）
      - spins: 取值 ±1 的整数序列，长度 N >= 0；不会被修改
      - rng: 均匀随机源；None 时为本次调用新建未播种的 Generator

    每个格点恰好消耗一个随机数（按格点顺序），ΔE < 0 的格点忽略其随机数。
    """
    if rng is None:
        rng = np.random.default_rng()
    out, _ = _metropolis_sweep_impl(_as_chain(spins), beta, J, rng)
    return out


def random_site_sweep(beta: float, J: float, spins: Any, rng: Optional[RandomSource] = None) -> np.ndarray:
    """
    随机选址的顺序 Metropolis sweep：N 次尝试，每次消耗两个随机数（选址 + 接受）。
    先取完 N 个选址随机数，再取 N 个接受随机数。输入不被修改。
    """
    if rng is None:
        rng = np.random.default_rng()
    out, _ = _random_site_sweep_impl(_as_chain(spins), beta, J, rng)
    return out


# -----------------------
# 算法名称规范化与注册
# -----------------------
def normalize_algo_name(name: str) -> str:
    if name is None:
        raise ValueError("Algorithm name must be provided")
    s = str(name).strip().lower().replace("-", "_").replace(" ", "_")
    if s in ("metro", "metropolis", "metropolis_sweep", "metropolissweep", "synchronous", "sync"):
        return "metropolis_sweep"
    if s in ("random", "random_site", "randomsite", "sequential", "random_site_sweep"):
        return "random_site"
    return s


_DEF_ALGOS: Dict[str, Callable[..., Tuple[np.ndarray, MoveMeta]]] = {
    "metropolis_sweep": _metropolis_sweep_impl,
    "random_site": _random_site_sweep_impl,
}


def get_algorithm(name: str) -> Callable[..., Tuple[np.ndarray, MoveMeta]]:
    n = normalize_algo_name(name)
    if n not in _DEF_ALGOS:
        raise ValueError(f"Unknown algorithm: {name} (normalized -> '{n}'). Known algorithms: {list(_DEF_ALGOS.keys())}")
    return _DEF_ALGOS[n]


@dataclass
class MoveInfo:
    algo: str
    accepted: Optional[int] = None
    attempts: Optional[int] = None
    rng_consumed: Optional[int] = None
    rng_model: Optional[str] = None
    replica_seed: Optional[int] = None


# -----------------------
# 统一入口 apply_move（支持 rng 或 replica_seed）
# -----------------------
def apply_move(
    spins: Any,
    beta: float,
    J: float,
    algo: str = "metropolis_sweep",
    replica_seed: Optional[int] = None,
    rng: Optional[RandomSource] = None,
) -> Tuple[np.ndarray, MoveInfo]:
    """
    统一入口。RNG 优先级：
      1. rng: 任意均匀随机源（优先；若同时给出 replica_seed 则忽略之并警告）
      2. replica_seed: 整数种子（构造 Philox Generator）
      3. 两者皆无：新建未播种的 default_rng()

    返回：
      (spins_out as np.ndarray(dtype=np.int32), MoveInfo)
    """
    name = normalize_algo_name(algo)
    f = get_algorithm(name)

    used_seed: Optional[int] = None
    if rng is not None:
        if replica_seed is not None:
            warnings.warn("Both 'rng' and 'replica_seed' given; replica_seed is ignored.", UserWarning, stacklevel=2)
        used_rng = rng
    elif replica_seed is not None:
        used_seed = int(replica_seed)
        used_rng = make_generator(used_seed)
    else:
        used_rng = np.random.default_rng()

    chain = _as_chain(spins)
    out, meta = f(chain, float(beta), float(J), used_rng)

    info = MoveInfo(
        algo=name,
        accepted=int(meta["accepted"]),
        attempts=int(meta["attempts"]),
        rng_consumed=int(meta["rng_consumed"]),
        rng_model=_rng_model(used_rng),
        replica_seed=used_seed,
    )
    logger.debug(
        "%s sweep: N=%d beta=%g J=%g accepted=%d rng_consumed=%d",
        name, chain.shape[0], float(beta), float(J), info.accepted, info.rng_consumed,
    )
    return out, info


def apply_config(spins: Any, cfg: Any, rng: Optional[RandomSource] = None) -> Tuple[np.ndarray, MoveInfo]:
    """按 SweepConfig（或含 ``.sweep`` 的 Config）执行一次 sweep。"""
    sweep_cfg = getattr(cfg, "sweep", cfg)
    return apply_move(
        spins,
        beta=sweep_cfg.beta,
        J=sweep_cfg.J,
        algo=sweep_cfg.algorithm,
        replica_seed=sweep_cfg.seed,
        rng=rng,
    )
