import numpy as np
import pytest

from nrss.phases import PhaseTable

from conftest import BLINKER, BLOCK, GLIDER, LWSS


def test_blinker_phases(life):
    phases = PhaseTable.build(life, BLINKER, 2, lattice_bits=6)
    assert len(phases) == 2
    assert (phases[0].height, phases[0].width) == (1, 3)
    assert (phases[1].height, phases[1].width) == (3, 1)
    assert phases.closes()
    assert phases.max_height == 3 and phases.max_width == 3


def test_cycle_closure(life):
    assert PhaseTable.build(life, BLOCK, 1, lattice_bits=6).closes()
    assert PhaseTable.build(life, LWSS, 4, lattice_bits=6).closes()
    assert not PhaseTable.build(life, LWSS, 3, lattice_bits=6).closes()
    assert not PhaseTable.build(life, GLIDER, 3, lattice_bits=6).closes()


def test_phase_zero_is_the_engine(life):
    phases = PhaseTable.build(life, np.array([[0, 1, 0], [0, 0, 1], [1, 1, 1]]), 4, lattice_bits=6)
    assert np.array_equal(phases[0].bits, [[0, 1, 0], [0, 0, 1], [1, 1, 1]])
    assert len(list(phases)) == 4


def test_phases_are_read_only(life):
    phases = PhaseTable.build(life, BLINKER, 2, lattice_bits=6)
    with pytest.raises(ValueError):
        phases[0].bits[0, 0] = 0


def test_dying_engine(life):
    with pytest.raises(ValueError):
        PhaseTable.build(life, '2o!', 5, lattice_bits=6)


def test_growing_engine(life):
    with pytest.raises(ValueError):
        PhaseTable.build(life, GLIDER, 200, lattice_bits=5)


def test_needs_a_phase(life):
    with pytest.raises(ValueError):
        PhaseTable.build(life, BLOCK, 0, lattice_bits=6)


def test_release(life):
    phases = PhaseTable.build(life, BLINKER, 2, lattice_bits=6)
    phases.release()
    with pytest.raises(ValueError):
        phases.closes()
    assert len(phases) == 2
