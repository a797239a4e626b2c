# examples/01_single_sweep.py

from ising_chain.core.algorithms import apply_config
from ising_chain.core.observables import chain_energy, magnetization
from ising_chain.utils.config import from_args
from ising_chain.utils.logger import setup_from_config


def main():
    # 1. 配置：默认 < --config 文件 < ISING_CHAIN__* 环境变量 < --set
    cfg = from_args()
    logger = setup_from_config(cfg)

    # 2. 初始构型（这里用交替自旋；真实调用方自行提供）
    spins = [1 if i % 3 else -1 for i in range(24)]

    # 3. 单次 sweep
    new_spins, info = apply_config(spins, cfg)

    logger.info("algo=%s accepted=%d/%d rng_consumed=%d",
                info.algo, info.accepted, info.attempts, info.rng_consumed)
    logger.info("E: %.3f -> %.3f", chain_energy(spins, cfg.sweep.J), chain_energy(new_spins, cfg.sweep.J))
    logger.info("m: %.3f -> %.3f", magnetization(spins), magnetization(new_spins))


if __name__ == "__main__":
    main()
