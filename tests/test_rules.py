import json

import numpy as np
import pytest

from nrss.errors import RuleError
from nrss.rules import CENTRE_BIT, TransitionTable


def test_life_table(life):
    assert life.rule == 'B3/S23'
    # dead cell with three neighbours is born
    assert life[0b111000000] == 1
    # live cell alone dies, with two neighbours survives
    assert life[CENTRE_BIT] == 0
    assert life[CENTRE_BIT | 0b100000001] == 1
    # overcrowding
    assert life[CENTRE_BIT | 0b111000111] == 0


def test_rulestring_forms():
    a = TransitionTable.from_rulestring('b3s23')
    b = TransitionTable.from_rulestring('B3/S23')
    assert a == b


def test_default_table():
    table = TransitionTable.default()
    assert table.rule.startswith('B2-ak3ce')
    assert table.table.shape == (512,)
    assert table[0] == 0


def test_save_and_load(tmp_path, life):
    path = tmp_path / 'life.json'
    life.save(str(path))
    assert TransitionTable.load(str(path)) == life
    doc = json.loads(path.read_text())
    assert len(doc['transitions']) == 512


def test_table_is_read_only(life):
    with pytest.raises(ValueError):
        life.table[5] = 1


@pytest.mark.parametrize('transitions', [[0] * 511, [0] * 511 + [2], [1] + [0] * 511])
def test_bad_tables(transitions):
    with pytest.raises(RuleError):
        TransitionTable(transitions, 'bad')


def test_bad_rulestrings():
    with pytest.raises(RuleError):
        TransitionTable.from_rulestring('B2-ak3ce/S1c')
    with pytest.raises(RuleError):
        TransitionTable.from_rulestring('B0/S8')


def test_load_errors(tmp_path):
    with pytest.raises(RuleError):
        TransitionTable.load(str(tmp_path / 'missing.json'))
    path = tmp_path / 'broken.json'
    path.write_text('{"rule": "x"}')
    with pytest.raises(RuleError):
        TransitionTable.load(str(path))
    path.write_text('not json')
    with pytest.raises(RuleError):
        TransitionTable.load(str(path))


def test_from_rulestring_counts_neighbours():
    table = TransitionTable.from_rulestring('B1/S')
    codes = np.arange(512)
    births = [c for c in codes if table[c]]
    # exactly the eight single-neighbour codes without the centre
    assert sorted(births) == sorted(1 << b for b in range(9) if b != 4)
