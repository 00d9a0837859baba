import pytest

from nrss.config import SearchConfig
from nrss.rules import TransitionTable

BLOCK = '2o$2o!'
BLINKER = '3o!'
GLIDER = 'bo$2bo$3o!'
LWSS = 'bo2bo$o4b$o3bo$4o!'


@pytest.fixture
def life():
    return TransitionTable.from_rulestring('B3/S23')


@pytest.fixture
def make_config(tmp_path):
    def make(**kw):
        settings = dict(engine_count=1, max_x_sep=0, max_period=20, randomize=False,
                        state_file=str(tmp_path / 'state.txt'), lattice_bits=7,
                        start_x=40, start_y=40, min_gap=7, max_gap=9,
                        phases=4, engine=LWSS, status_every=3600.0)
        settings.update(kw)
        return SearchConfig(**settings)
    return make
