import numpy as np
import pytest

from Colony.config import Defaults
from Colony.zone import Anchor, AnchorRole, Zone


def build_zone(name="W1N1",
               size=50,
               home=(25, 25),
               resources=(("src1", (25, 10)),),
               control=("ctrl", (40, 40)),
               bonus=None,
               level=1,
               walls=(),
               slow=(),
               terrain=None,
               **kwargs) -> Zone:
    """Open square zone laid out like the usual test colony; pass None to drop an anchor."""
    if terrain is None:
        terrain = np.full((size, size), Defaults.TERRAIN_OPEN, dtype=np.uint8)
    for x, y in walls:
        terrain[y, x] = Defaults.TERRAIN_BLOCKED
    for x, y in slow:
        terrain[y, x] = Defaults.TERRAIN_SLOW

    anchors = []
    if home is not None:
        anchors.append(Anchor("spawn", AnchorRole.HOME, home))
    for anchor_id, cell in resources:
        anchors.append(Anchor(anchor_id, AnchorRole.RESOURCE, cell))
    if control is not None:
        anchors.append(Anchor(control[0], AnchorRole.CONTROL, control[1]))
    if bonus is not None:
        anchors.append(Anchor(bonus[0], AnchorRole.BONUS_RESOURCE, bonus[1]))

    return Zone(name, terrain, anchors, development_level=level, **kwargs)


@pytest.fixture
def make_zone():
    return build_zone


@pytest.fixture
def zone():
    return build_zone()


@pytest.fixture
def bare_zone():
    """20x20 open zone without any anchors."""
    return build_zone(size=20, home=None, resources=(), control=None)


@pytest.fixture(params=["PYTHON", "NUMBA"])
def solver_method(request):
    return request.param
