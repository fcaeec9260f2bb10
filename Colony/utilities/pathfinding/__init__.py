import logging

from ...config import Defaults
from .astar_python import astar_python
from .astar_numba import astar_numba

logger = logging.getLogger(__name__)

SOLVERS = {
    "NUMBA": astar_numba,
    "PYTHON": astar_python,
}

if Defaults.PATHFINDING_METHOD == "NUMBA":
    astar = astar_numba
    logger.debug("Requested NUMBA → Using Numba A* implementation")
elif Defaults.PATHFINDING_METHOD == "PYTHON":
    astar = astar_python
    logger.debug("Requested PYTHON → Using heapq A* implementation")
else:
    raise ValueError(f"unknown PATHFINDING_METHOD {Defaults.PATHFINDING_METHOD!r}")
