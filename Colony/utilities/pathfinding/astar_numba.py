import numpy as np
from numba import njit

from Colony.config import Defaults

# Direction deltas in Defaults.AVAILABLE_DIRECTIONS order (N, NE, E, SE, S, SW, W, NW)
NEIGHBOR_DELTAS = np.array(
    [Defaults.DIRECTION_VECTORS[d] for d in Defaults.AVAILABLE_DIRECTIONS], dtype=np.int64
)
BLOCKED_COST = Defaults.COST_BLOCKED


@njit(inline='always')
def heap_less(f_arr: np.ndarray, q_arr: np.ndarray, a: int, b: int) -> bool:
    # (f, push sequence) ordering
    if f_arr[a] != f_arr[b]:
        return f_arr[a] < f_arr[b]
    return q_arr[a] < q_arr[b]


@njit(inline='always')
def heap_swap(f_arr: np.ndarray, q_arr: np.ndarray, i_arr: np.ndarray, a: int, b: int):
    f_arr[a], f_arr[b] = f_arr[b], f_arr[a]
    q_arr[a], q_arr[b] = q_arr[b], q_arr[a]
    i_arr[a], i_arr[b] = i_arr[b], i_arr[a]


@njit(inline='always')
def heap_sift_up(f_arr: np.ndarray, q_arr: np.ndarray, i_arr: np.ndarray, i: int):
    while i > 0:
        parent = (i - 1) // 2
        if heap_less(f_arr, q_arr, i, parent):
            heap_swap(f_arr, q_arr, i_arr, i, parent)
            i = parent
        else:
            break


@njit(inline='always')
def heap_sift_down(f_arr: np.ndarray, q_arr: np.ndarray, i_arr: np.ndarray, size: int):
    idx = 0
    while True:
        left = 2 * idx + 1
        right = left + 1
        smallest = idx
        if left < size and heap_less(f_arr, q_arr, left, smallest):
            smallest = left
        if right < size and heap_less(f_arr, q_arr, right, smallest):
            smallest = right
        if smallest != idx:
            heap_swap(f_arr, q_arr, i_arr, idx, smallest)
            idx = smallest
        else:
            break


@njit(inline='always')
def chebyshev_gap(x: int, y: int, goal_x: int, goal_y: int, radius: int) -> int:
    dx = abs(x - goal_x)
    dy = abs(y - goal_y)
    d = dx if dx > dy else dy
    d -= radius
    return d if d > 0 else 0


@njit
def astar_core(costs: np.ndarray,
               width: int, height: int,
               start_x: int, start_y: int,
               goal_x: int, goal_y: int,
               radius: int,
               max_ops: int,
               f_arr: np.ndarray,
               q_arr: np.ndarray,
               i_arr: np.ndarray,
               g_cost: np.ndarray,
               came_from: np.ndarray,
               closed: np.ndarray,
               path_out: np.ndarray):
    """
    A* over an entry-cost matrix with an array-backed binary heap.

    Writes the flat indices of the route (excluding start) into *path_out*
    and returns ``(length, ops, cost)``; ``length == -1`` means no path.
    """
    INF = 0x3F3F3F3F
    n = width * height
    start_idx = start_y * width + start_x

    for i in range(n):
        g_cost[i] = INF
        came_from[i] = -1
        closed[i] = 0
    g_cost[start_idx] = 0

    heap_size = 1
    seq = 0
    f_arr[0] = chebyshev_gap(start_x, start_y, goal_x, goal_y, radius)
    q_arr[0] = seq
    i_arr[0] = start_idx
    seq += 1

    ops = 0
    while heap_size > 0:
        # pop
        current_idx = i_arr[0]
        heap_size -= 1
        if heap_size > 0:
            f_arr[0] = f_arr[heap_size]
            q_arr[0] = q_arr[heap_size]
            i_arr[0] = i_arr[heap_size]
            heap_sift_down(f_arr, q_arr, i_arr, heap_size)

        if closed[current_idx] == 1:
            continue

        cx = current_idx % width
        cy = current_idx // width
        g = g_cost[current_idx]

        # reached the acceptance region
        if chebyshev_gap(cx, cy, goal_x, goal_y, radius) == 0:
            length = 0
            idx = current_idx
            while idx != start_idx:
                length += 1
                idx = came_from[idx]
            idx = current_idx
            for j in range(length - 1, -1, -1):
                path_out[j] = idx
                idx = came_from[idx]
            return length, ops, g

        ops += 1
        if ops > max_ops:
            return -1, ops, 0
        closed[current_idx] = 1

        for d in range(8):
            nx = cx + NEIGHBOR_DELTAS[d, 0]
            ny = cy + NEIGHBOR_DELTAS[d, 1]
            if nx < 0 or nx >= width or ny < 0 or ny >= height:
                continue
            step = costs[ny, nx]
            if step >= BLOCKED_COST:
                continue
            nidx = ny * width + nx
            if closed[nidx] == 1:
                continue

            ng = g + step
            if ng < g_cost[nidx]:
                g_cost[nidx] = ng
                came_from[nidx] = current_idx
                i = heap_size
                f_arr[i] = ng + chebyshev_gap(nx, ny, goal_x, goal_y, radius)
                q_arr[i] = seq
                i_arr[i] = nidx
                seq += 1
                heap_sift_up(f_arr, q_arr, i_arr, i)
                heap_size += 1

    return -1, ops, 0

# Python wrapper to pre-allocate buffers

def astar_numba(costs: np.ndarray, start: tuple[int, int], goal: tuple[int, int],
                radius: int, max_ops: int) -> tuple[list[tuple[int, int]], bool, int, int]:
    height, width = costs.shape
    size = width * height
    # every closed node relaxes each of its 8 neighbours at most once
    heap_capacity = 8 * size + 1

    f_arr = np.empty(heap_capacity, np.int64)
    q_arr = np.empty(heap_capacity, np.int64)
    i_arr = np.empty(heap_capacity, np.int64)
    g_cost = np.empty(size, np.int64)
    came_from = np.empty(size, np.int64)
    closed = np.empty(size, np.int8)
    path_out = np.empty(size, np.int64)

    length, ops, cost = astar_core(np.ascontiguousarray(costs, dtype=np.uint8),
                                   width, height,
                                   int(start[0]), int(start[1]),
                                   int(goal[0]), int(goal[1]),
                                   int(radius), int(max_ops),
                                   f_arr, q_arr, i_arr,
                                   g_cost, came_from, closed, path_out)
    if length < 0:
        return [], False, int(ops), 0

    path = [(int(idx % width), int(idx // width)) for idx in path_out[:length]]
    return path, True, int(ops), int(cost)
