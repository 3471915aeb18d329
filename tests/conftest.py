import logging
import types
from typing import Generator

import pytest

from dialogtree import core, config
from . import make_infos

# some logging to turn on if we like
#logging.getLogger("dialogtree.parser").level = logging.DEBUG
#logging.getLogger("dialogtree.manager").level = logging.DEBUG

@pytest.fixture
def infos() -> core.DialogCustomInfos:
    return make_infos()

@pytest.fixture
def empty_infos() -> core.DialogCustomInfos:
    return core.DialogCustomInfos([], (-100, 100), [])

@pytest.fixture
def settings() -> Generator[types.SimpleNamespace, None, None]:
    # tests may reload the config, put the built-in one back afterwards
    yield config.Settings
    config.load_config()
