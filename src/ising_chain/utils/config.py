# -*- coding: utf-8 -*-
"""
sweep 参数与日志配置

    Config
      ├─ sweep: SweepConfig(beta, J, algorithm, seed)
      └─ log_level / log_file / log_rotate / log_utc（交给 utils.logger.setup_from_config）

来源按优先级叠加：默认 < --config 文件(yaml|json) < 环境变量 ISING_CHAIN__a__b < --set a.b=v。
标量文本一律用 YAML 规则解析（"0.5"→float，"true"→bool，"null"→None），
YAML 不认识的浮点写法（"inf"、"1e3"）再按 float 解析。

注意：sweep 内核本身不做任何校验；这里是调用层的校验。
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple

import yaml

from ..core.algorithms import get_algorithm, normalize_algo_name

__all__ = [
    'Config', 'SweepConfig',
    'load_config', 'save_config',
    'load_from_env', 'merge_configs', 'validate_config', 'from_args'
]

logger = logging.getLogger(__name__)

Layer = Dict[str, Any]


def _scalar(text: Optional[str]) -> Any:
    if text is None:
        return None
    try:
        value = yaml.safe_load(text)
    except yaml.YAMLError:
        return text
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _nest(path: List[str], value: Any) -> Layer:
    """['sweep', 'beta'], 0.5 → {'sweep': {'beta': 0.5}}"""
    layer: Any = value
    for key in reversed(path):
        layer = {key: layer}
    return layer


def _overlay(base: Layer, patch: Layer) -> Layer:
    """返回新 dict：patch 递归覆盖 base，两者都不被修改。"""
    merged = dict(base)
    for key, value in (patch or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _overlay(merged[key], value)
        else:
            merged[key] = value
    return merged


# -----------------------------------------------------------------------------
# Dataclasses
# -----------------------------------------------------------------------------
@dataclass
class SweepConfig:
    beta: float = 1.0                     # 逆温度
    J: float = 1.0                        # 耦合常数（J>0 铁磁）
    algorithm: str = 'metropolis_sweep'   # 算法注册表中的名称（同义词会归一化）
    seed: Optional[int] = None            # None ⇒ 每次 sweep 使用未播种的 Generator

    def __post_init__(self):
        for name in ('beta', 'J'):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise ValueError(f"{name} must be a real number, got {v!r}")
            setattr(self, name, float(v))

        self.algorithm = normalize_algo_name(self.algorithm)
        get_algorithm(self.algorithm)  # 未注册 ⇒ ValueError

        if self.seed is not None:
            if isinstance(self.seed, bool) or not isinstance(self.seed, int) or self.seed < 0:
                raise ValueError(f"seed must be a non-negative int or None, got {self.seed!r}")


@dataclass
class Config:
    sweep: SweepConfig = field(default_factory=SweepConfig)

    log_level: str = 'INFO'
    log_file: Optional[str] = None
    log_rotate: Optional[Dict[str, Any]] = None   # {'maxBytes':..} 或 {'when':..}
    log_utc: bool = False
    project_name: str = 'ising_chain'
    version: int = 1

    def __post_init__(self):
        if isinstance(self.sweep, dict):
            self.sweep = SweepConfig(**self.sweep)
        if self.log_rotate is not None and not isinstance(self.log_rotate, dict):
            raise ValueError(f"log_rotate must be a mapping or None, got {self.log_rotate!r}")
        self.log_level = str(self.log_level).upper()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> 'Config':
        return cls(**(d or {}))


# -----------------------------------------------------------------------------
# I/O
# -----------------------------------------------------------------------------
_FORMATS = {'.yaml': 'yaml', '.yml': 'yaml', '.json': 'json'}


def load_config(filepath: str) -> Config:
    """读取 .yaml/.yml/.json；文件缺失抛 FileNotFoundError，其它后缀抛 ValueError。"""
    p = Path(filepath)
    if not p.exists():
        raise FileNotFoundError(f"Config file not found: {filepath}")
    fmt = _FORMATS.get(p.suffix.lower())
    if fmt is None:
        raise ValueError(f"Unsupported config file extension: {p.suffix}")
    text = p.read_text(encoding='utf-8')
    data = yaml.safe_load(text) if fmt == 'yaml' else json.loads(text)
    return Config.from_dict(data)


def save_config(config: Config, filepath: str, format: Optional[str] = None):
    """写出 Config；format 缺省时按后缀判断（未知后缀写 YAML）。"""
    p = Path(filepath)
    fmt = format or _FORMATS.get(p.suffix.lower(), 'yaml')
    if fmt == 'yaml':
        text = yaml.safe_dump(config.to_dict(), default_flow_style=False, allow_unicode=True, sort_keys=False)
    elif fmt == 'json':
        text = json.dumps(config.to_dict(), indent=2, ensure_ascii=False)
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding='utf-8')
    logger.info("Config saved: %s", p)


# -----------------------------------------------------------------------------
# Layers
# -----------------------------------------------------------------------------
def load_from_env(prefix: str = 'ISING_CHAIN', sep: str = '__') -> Layer:
    """ISING_CHAIN__sweep__beta=0.5 → {'sweep': {'beta': 0.5}}"""
    layer: Layer = {}
    head = prefix + sep
    for key in sorted(os.environ):
        if not key.startswith(head):
            continue
        path = [part for part in key[len(head):].split(sep) if part]
        if path:
            layer = _overlay(layer, _nest(path, _scalar(os.environ[key])))
    return layer


def _layer_from_sets(pairs: List[str]) -> Layer:
    """['sweep.beta=0.5', ...] → {'sweep': {'beta': 0.5}}"""
    layer: Layer = {}
    for pair in pairs:
        key, eq, raw = pair.partition('=')
        if not eq:
            raise ValueError(f"--set expects key=value pairs, got: {pair}")
        path = [part.strip() for part in key.split('.') if part.strip()]
        if path:
            layer = _overlay(layer, _nest(path, _scalar(raw)))
    return layer


def merge_configs(base: Config, override: Layer) -> Config:
    """override（嵌套 dict）覆盖 base，返回新的 Config。"""
    return Config.from_dict(_overlay(base.to_dict(), override or {}))


def validate_config(cfg: Config) -> Tuple[bool, List[str]]:
    """软一致性检查：只返回 issues，不抛错。"""
    issues: List[str] = []
    beta, J = cfg.sweep.beta, cfg.sweep.J

    if not math.isfinite(beta):
        issues.append(f"sweep.beta={beta} is not finite -- acceptance probabilities degenerate")
    elif beta < 0:
        issues.append(f"sweep.beta={beta} < 0 -- energy-raising moves are favoured")
    elif beta == 0:
        issues.append("sweep.beta=0 -- every site flips unconditionally")

    if not math.isfinite(J):
        issues.append(f"sweep.J={J} is not finite -- energy changes degenerate")
    elif J == 0:
        issues.append("sweep.J=0 -- every site flips unconditionally")

    return not issues, issues


def from_args(args: Optional[List[str]] = None, env_prefix: str = 'ISING_CHAIN') -> Config:
    """默认 <- --config 文件 <- 环境变量(--env-prefix) <- --set k=v（可重复）"""
    ap = argparse.ArgumentParser(description="Load & merge sweep configuration")
    ap.add_argument('--config', type=str, help='config file (yaml|json)')
    ap.add_argument('--env-prefix', type=str, default=env_prefix,
                    help='environment variable prefix (default ISING_CHAIN)')
    ap.add_argument('--set', dest='sets', action='append', default=[],
                    help='override key=value (dot notation, can repeat)')
    ns = ap.parse_args(args=args)

    layers = [
        load_config(ns.config).to_dict() if ns.config else {},
        load_from_env(prefix=ns.env_prefix),
        _layer_from_sets(ns.sets),
    ]
    merged: Layer = Config().to_dict()
    for layer in layers:
        merged = _overlay(merged, layer)
    cfg = Config.from_dict(merged)

    for issue in validate_config(cfg)[1]:
        logger.warning("Config validation: %s", issue)
    return cfg
