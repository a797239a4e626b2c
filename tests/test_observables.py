# tests/test_observables.py
import numpy as np
import pytest

from ising_chain.core.algorithms import delta_energy
from ising_chain.core.observables import chain_energy, flip_mask, magnetization


def test_energy_all_up_and_alternating():
    assert chain_energy([1, 1, 1, 1], J=1.0) == pytest.approx(-4.0)
    assert chain_energy([-1, -1, -1, -1], J=1.0) == pytest.approx(-4.0)
    assert chain_energy([1, -1, 1, -1], J=1.0) == pytest.approx(4.0)
    assert chain_energy([1, 1, 1, 1], J=-0.5) == pytest.approx(2.0)


def test_energy_degenerate_sizes():
    assert chain_energy([], J=1.0) == 0.0
    # N=1：唯一的键连接格点自身
    assert chain_energy([-1], J=2.0) == pytest.approx(-2.0)


@pytest.mark.parametrize("N", [3, 5, 8])
def test_delta_energy_matches_single_flip(N):
    rng = np.random.default_rng(N)
    spins = rng.choice([-1, 1], size=N)
    J = 0.7
    dE = delta_energy(spins, J)
    E0 = chain_energy(spins, J)
    for i in range(N):
        flipped = spins.copy()
        flipped[i] = -flipped[i]
        assert chain_energy(flipped, J) - E0 == pytest.approx(dE[i])


def test_magnetization():
    assert magnetization([1, 1, -1, -1]) == pytest.approx(0.0)
    assert magnetization([1, 1, 1, -1]) == pytest.approx(0.5)
    assert magnetization([]) == 0.0


def test_flip_mask():
    mask = flip_mask([1, -1, 1], [-1, -1, 1])
    assert mask.tolist() == [True, False, False]
    with pytest.raises(ValueError):
        flip_mask([1, 1], [1, 1, 1])
