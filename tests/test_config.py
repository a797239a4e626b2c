# -*- coding: utf-8 -*-
"""
配置管理单元测试

覆盖范围：
1. SweepConfig 构造期硬约束与算法名归一化
2. YAML / JSON 读写往返
3. 环境变量 / --set 覆盖与优先级
4. validate_config 软警告
"""

import json
import math

import pytest

from ising_chain.utils import config as cfgmod
from ising_chain.utils.config import (
    Config,
    SweepConfig,
    from_args,
    load_config,
    load_from_env,
    merge_configs,
    save_config,
    validate_config,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    import os
    for k in list(os.environ):
        if k.startswith("ISING_CHAIN__"):
            monkeypatch.delenv(k, raising=False)


def test_defaults():
    cfg = Config()
    assert cfg.sweep.beta == 1.0
    assert cfg.sweep.J == 1.0
    assert cfg.sweep.algorithm == "metropolis_sweep"
    assert cfg.sweep.seed is None


def test_algorithm_synonyms_and_int_coercion():
    sw = SweepConfig(beta=1, J=-2, algorithm="Sequential")
    assert sw.algorithm == "random_site"
    assert isinstance(sw.beta, float) and isinstance(sw.J, float)


@pytest.mark.parametrize("kwargs", [
    {"beta": "hot"},
    {"J": None},
    {"beta": True},
    {"algorithm": "wolff"},
    {"seed": -1},
    {"seed": 1.5},
    {"seed": True},
])
def test_invalid_sweep_config(kwargs):
    with pytest.raises(ValueError):
        SweepConfig(**kwargs)


@pytest.mark.parametrize("suffix", [".yaml", ".yml", ".json"])
def test_save_load_roundtrip(tmp_path, suffix):
    cfg = Config(sweep=SweepConfig(beta=0.44, J=-1.0, algorithm="metro", seed=7), log_level="DEBUG")
    path = tmp_path / "sub" / f"cfg{suffix}"
    save_config(cfg, str(path))
    loaded = load_config(str(path))
    assert loaded.to_dict() == cfg.to_dict()


def test_save_json_is_plain_json(tmp_path):
    path = tmp_path / "cfg.json"
    save_config(Config(), str(path))
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["sweep"]["algorithm"] == "metropolis_sweep"


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))
    bad = tmp_path / "cfg.toml"
    bad.write_text("x = 1", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(bad))
    with pytest.raises(ValueError):
        save_config(Config(), str(tmp_path / "cfg.yaml"), format="ini")


def test_load_from_env(monkeypatch):
    monkeypatch.setenv("ISING_CHAIN__sweep__beta", "0.25")
    monkeypatch.setenv("ISING_CHAIN__sweep__algorithm", "random")
    monkeypatch.setenv("ISING_CHAIN__log_level", "WARNING")
    env = load_from_env()
    assert env == {"sweep": {"beta": 0.25, "algorithm": "random"}, "log_level": "WARNING"}


def test_parse_values():
    assert cfgmod._scalar("42") == 42
    assert cfgmod._scalar("true") is True
    assert cfgmod._scalar("null") is None
    assert math.isinf(cfgmod._scalar("inf"))
    assert cfgmod._scalar("metro") == "metro"


def test_merge_configs_does_not_touch_base():
    base = Config()
    merged = merge_configs(base, {"sweep": {"J": -1.0}})
    assert merged.sweep.J == -1.0
    assert merged.sweep.beta == base.sweep.beta
    assert base.sweep.J == 1.0


def test_from_args_precedence(tmp_path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    save_config(Config(sweep=SweepConfig(beta=0.3, J=2.0)), str(path))

    cfg = from_args(["--config", str(path)])
    assert cfg.sweep.beta == 0.3 and cfg.sweep.J == 2.0

    monkeypatch.setenv("ISING_CHAIN__sweep__beta", "0.4")
    cfg = from_args(["--config", str(path)])
    assert cfg.sweep.beta == 0.4 and cfg.sweep.J == 2.0

    cfg = from_args(["--config", str(path), "--set", "sweep.beta=0.5", "--set", "sweep.seed=3"])
    assert cfg.sweep.beta == 0.5
    assert cfg.sweep.seed == 3


def test_from_args_custom_prefix(monkeypatch):
    monkeypatch.setenv("MYSIM__sweep__J", "-0.5")
    cfg = from_args(["--env-prefix", "MYSIM"])
    assert cfg.sweep.J == -0.5


def test_from_args_bad_set():
    with pytest.raises(ValueError):
        from_args(["--set", "sweep.beta"])


def test_validate_config():
    ok, issues = validate_config(Config())
    assert ok and issues == []

    ok, issues = validate_config(Config(sweep=SweepConfig(beta=0.0, J=0.0)))
    assert not ok
    assert len(issues) == 2

    ok, issues = validate_config(Config(sweep=SweepConfig(beta=-1.0, J=float("nan"))))
    assert not ok
    assert any("beta" in s for s in issues)
    assert any("J" in s for s in issues)


def test_every_registered_algorithm_is_accepted():
    from ising_chain.core.algorithms import _DEF_ALGOS
    for name in _DEF_ALGOS:
        assert SweepConfig(algorithm=name).algorithm == name


def test_scalar_float_forms():
    assert cfgmod._scalar("1e3") == 1000.0
    assert cfgmod._scalar("-0.5") == -0.5


def test_log_fields_roundtrip(tmp_path):
    cfg = Config(log_level="debug", log_file="logs/run.log",
                 log_rotate={"maxBytes": 2048, "backupCount": 2}, log_utc=True)
    assert cfg.log_level == "DEBUG"
    path = tmp_path / "cfg.yaml"
    save_config(cfg, str(path))
    loaded = load_config(str(path))
    assert loaded.log_rotate == {"maxBytes": 2048, "backupCount": 2}
    assert loaded.log_utc is True
    assert loaded.to_dict() == cfg.to_dict()


def test_log_rotate_from_set():
    cfg = from_args(["--set", "log_rotate.when=D", "--set", "log_rotate.backupCount=4"])
    assert cfg.log_rotate == {"when": "D", "backupCount": 4}


def test_log_rotate_must_be_mapping():
    with pytest.raises(ValueError):
        Config(log_rotate="daily")
