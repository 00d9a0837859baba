import numpy as np
import pytest

from nrss import rle
from nrss.errors import UnboundedGrowth
from nrss.lattice import MARGIN, Lattice
from nrss.rules import TransitionTable

from conftest import BLINKER, BLOCK, GLIDER


def life_step(grid):
    """Plain toroidal Life step used as a reference."""
    neighbors = sum(np.roll(np.roll(grid, i, 0), j, 1)
                    for i in (-1, 0, 1) for j in (-1, 0, 1)
                    if not (i == 0 and j == 0))
    birth = (neighbors == 3) & (grid == 0)
    survive = ((neighbors == 2) | (neighbors == 3)) & (grid == 1)
    return (birth | survive).astype(np.uint8)


def check_tight(lattice):
    live = np.nonzero(lattice.cells)
    if lattice.box is None:
        assert live[0].size == 0
        return
    top, bottom, left, right = lattice.box
    assert live[0].min() == top and live[0].max() == bottom
    assert live[1].min() == left and live[1].max() == right


def test_block_is_still(life):
    lattice = Lattice(life, 6, 6)
    block, _ = rle.decode(BLOCK)
    lattice.place(block, 20, 30)
    assert lattice.box == (20, 21, 30, 31)
    for _ in range(100):
        assert lattice.step()
        assert lattice.box == (20, 21, 30, 31)
        assert np.array_equal(lattice.content(), block)
    assert lattice.population == 4


def test_blinker(life):
    lattice = Lattice(life, 6, 6)
    lattice.place(rle.decode(BLINKER)[0], 20, 20)
    assert lattice.step()
    assert lattice.box == (19, 21, 21, 21)
    assert lattice.step()
    assert lattice.box == (20, 20, 20, 22)


def test_matches_reference_step(life):
    rng = np.random.default_rng(7)
    soup = (rng.random((10, 10)) < 0.4).astype(np.uint8)
    lattice = Lattice(life, 7, 7)
    lattice.place(soup, 59, 59)
    grid = lattice.cells.copy()
    for _ in range(30):
        alive = lattice.step()
        grid = life_step(grid)
        assert np.array_equal(lattice.cells, grid)
        check_tight(lattice)
        if not alive:
            break


def test_bounding_box_stays_tight(life):
    rng = np.random.default_rng(0)
    for trial in range(5):
        lattice = Lattice(life, 6, 6)
        lattice.place((rng.random((8, 8)) < 0.5).astype(np.uint8), 28, 28)
        check_tight(lattice)
        for _ in range(12):
            lattice.step()
            check_tight(lattice)


def test_neighbour_bit_order():
    # each cell copies its top-left neighbour, so patterns move down and right
    down_right = TransitionTable([(c >> 8) & 1 for c in range(512)], 'copy-a')
    lattice = Lattice(down_right, 6, 6)
    lattice.place(rle.decode(GLIDER)[0], 10, 10)
    before = lattice.content()
    lattice.step()
    assert lattice.box == (11, 13, 11, 13)
    assert np.array_equal(lattice.content(), before)

    # each cell copies its right neighbour, so patterns move left
    left = TransitionTable([(c >> 1) & 1 for c in range(512)], 'copy-h')
    lattice = Lattice(left, 6, 6)
    lattice.place(rle.decode(GLIDER)[0], 10, 10)
    lattice.step()
    assert lattice.box == (10, 12, 9, 11)
    assert np.array_equal(lattice.content(), before)


def test_extinction(life):
    lattice = Lattice(life, 6, 6)
    lattice.place([[1, 1]], 10, 10)
    assert not lattice.step()
    assert lattice.box is None
    assert lattice.empty
    assert not lattice.cells.any()
    assert not lattice.step()


def test_growth_reaches_margin(life):
    lattice = Lattice(life, 6, 6)
    lattice.place(rle.decode(GLIDER)[0], 40, 40)
    with pytest.raises(UnboundedGrowth):
        for _ in range(200):
            lattice.step()
    assert lattice.at_margin()
    top, bottom, left, right = lattice.box
    assert bottom >= lattice.height - MARGIN or right >= lattice.width - MARGIN


def test_clear(life):
    lattice = Lattice(life, 6, 6)
    lattice.place(rle.decode(GLIDER)[0], 10, 10)
    for _ in range(5):
        lattice.step()
    lattice.clear()
    assert lattice.box is None
    assert not lattice.cells.any()
    assert lattice.content().shape == (0, 0)


def test_place_merges(life):
    lattice = Lattice(life, 6, 6)
    lattice.place([[1, 0], [0, 0]], 10, 10)
    lattice.place([[0, 0], [0, 1]], 10, 10)
    assert np.array_equal(lattice.content(), [[1, 0], [0, 1]])
    # dead cells in the placed block do not widen the box
    lattice.place([[0, 0, 0], [0, 0, 1]], 20, 20)
    assert lattice.box == (10, 21, 10, 22)


@pytest.mark.parametrize('top,left', [(0, 10), (10, 1), (62, 10), (10, 61)])
def test_place_out_of_bounds(life, top, left):
    lattice = Lattice(life, 6, 6)
    with pytest.raises(IndexError):
        lattice.place([[1, 1]], top, left)


def test_bad_size(life):
    with pytest.raises(ValueError):
        Lattice(life, 2, 6)
