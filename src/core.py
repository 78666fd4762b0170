# core.py
# Board transformation and merge engine for the 2048 game.
# Cells hold ranks: 0 is empty, r >= 1 is a tile showing 2 ** r.

from enum import Enum
from typing import Iterator, List, Tuple
import logging
import random

logger = logging.getLogger(__name__)

SIZE = 4
# Every merge frees one cell, so a 4x4 grid cannot build past rank 17 (131072).
MAX_RANK = SIZE * SIZE + 1

class DIRECTION(Enum):
    """Represents the possible move directions."""
    UP = 1
    DOWN = 2
    LEFT = 3
    RIGHT = 4

# --- Grid ---

class Grid:
    """
    Square grid of tile ranks, stored column-major: cells[x][y].
    Column 0 is the leftmost column, row 0 is the top row.
    """

    def __init__(self, size: int = SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Board size must be a positive integer.")
        self.size = size
        self.cells: List[List[int]] = [[0] * size for _ in range(size)]

    @classmethod
    def from_rows(cls, rows: List[List[int]]) -> "Grid":
        """
        Builds a grid from row-major ranks, the way a board is written down.
        Args:
            rows (List[List[int]]): rows[y][x] holds the rank at column x, row y.
        Returns:
            Grid: A new grid holding the given ranks.
        Raises:
            ValueError: If the rows are not a non-empty square matrix of ranks >= 0.
        """
        if not rows or not all(len(row) == len(rows) for row in rows):
            raise ValueError("Board must be a non-empty square matrix.")
        grid = cls(len(rows))
        for y, row in enumerate(rows):
            for x, rank in enumerate(row):
                if rank < 0:
                    raise ValueError("Ranks must be non-negative.")
                grid.cells[x][y] = rank
        return grid

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.size and 0 <= y < self.size):
            raise IndexError(f"Cell ({x}, {y}) is outside a {self.size}x{self.size} grid.")

    def get(self, x: int, y: int) -> int:
        """
        Reads one cell.
        Args:
            x (int): Column, 0 is leftmost.
            y (int): Row, 0 is the top row.
        Returns:
            int: The rank stored there, 0 if empty.
        Raises:
            IndexError: If (x, y) is outside the grid.
        """
        self._check(x, y)
        return self.cells[x][y]

    def set(self, x: int, y: int, rank: int) -> None:
        """
        Writes one cell.
        Args:
            x (int): Column, 0 is leftmost.
            y (int): Row, 0 is the top row.
            rank (int): Rank to store, 0 to empty the cell.
        Raises:
            IndexError: If (x, y) is outside the grid.
        """
        self._check(x, y)
        self.cells[x][y] = rank

    def empty_cells(self) -> List[Tuple[int, int]]:
        """
        Get coordinates of empty (rank 0) cells.
        Returns:
            List[Tuple[int, int]]: (x, y) tuples, column by column.
        """
        empty_cells = []
        for x in range(self.size):
            for y in range(self.size):
                if self.cells[x][y] == 0:
                    empty_cells.append((x, y))
        return empty_cells

    def count_empty(self) -> int:
        """
        Counts the empty cells.
        Returns:
            int: Number of cells holding rank 0.
        """
        return sum(column.count(0) for column in self.cells)

    def clear(self) -> None:
        """Empties every cell in place."""
        for column in self.cells:
            for y in range(self.size):
                column[y] = 0

    def rows(self) -> List[List[int]]:
        """Row-major copy of the ranks, top row first."""
        return [[self.cells[x][y] for x in range(self.size)] for y in range(self.size)]

    def copy(self) -> "Grid":
        """
        Copies the grid.
        Returns:
            Grid: An independent grid with the same ranks.
        """
        grid = Grid(self.size)
        grid.cells = [list(column) for column in self.cells]
        return grid

    def __iter__(self) -> Iterator[List[int]]:
        return iter(self.cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.cells == other.cells

    def __repr__(self) -> str:
        return f"Grid.from_rows({self.rows()!r})"

# --- Line Manipulation (Core Move Logic) ---

def _find_target(line: List[int], x: int, stop: int) -> int:
    """
    Finds where the tile at index x ends up when sliding toward index 0.
    Args:
        line (List[int]): The line being slid.
        x (int): Index of a non-empty tile.
        stop (int): Lowest index the tile may reach this pass.
    Returns:
        int: The target index; equals x if the tile cannot move.
    """
    if x == 0:
        return x
    for t in range(x - 1, stop - 1, -1):
        if line[t] != 0:
            if line[t] != line[x]:
                # merge is not possible, take the next position
                return t + 1
            return t
    return stop if stop < x else x

def slide_line(line: List[int]) -> Tuple[List[int], int, bool]:
    """
    Slides a single line toward index 0 in place, merging equal tiles once each.
    Args:
        line (List[int]): Ranks ordered from the near end (index 0) to the far end.
    Returns:
        Tuple[List[int], int, bool]: The same (mutated) line, the score gained,
                                     and whether any tile moved or merged.
    """
    changed = False
    score = 0
    stop = 0

    for x in range(len(line)):
        if line[x] == 0:
            continue
        t = _find_target(line, x, stop)
        if t == x:
            continue
        if line[t] == 0:
            line[t] = line[x]
        elif line[t] == line[x]:
            line[t] += 1
            score += 1 << line[t]
            # a merged tile must not merge again this pass
            stop = t + 1
        line[x] = 0
        changed = True

    return line, score, changed

# --- Board Transformations ---

def rotate_board(grid: Grid) -> None:
    """
    Rotates the stored cells 90 degrees counter-clockwise in place.
    Since storage is column-major, the board as displayed turns clockwise.
    """
    n = grid.size
    b = grid.cells
    for i in range(n // 2):
        for j in range(i, n - i - 1):
            tmp = b[i][j]
            b[i][j] = b[j][n - i - 1]
            b[j][n - i - 1] = b[n - i - 1][n - j - 1]
            b[n - i - 1][n - j - 1] = b[n - j - 1][i]
            b[n - j - 1][i] = tmp

def _rotate_times(grid: Grid, times: int) -> None:
    for _ in range(times % 4):
        rotate_board(grid)

# --- Core Game Move Processing ---

def move_up(grid: Grid) -> Tuple[int, bool]:
    """
    Slides every column toward row 0.
    Args:
        grid (Grid): The board, mutated in place.
    Returns:
        Tuple[int, bool]: Total score gained and whether any column changed.
    """
    total_score = 0
    board_changed = False
    for column in grid.cells:
        _, score, changed = slide_line(column)
        total_score += score
        board_changed |= changed
    return total_score, board_changed

def _move_rotated(grid: Grid, before: int) -> Tuple[int, bool]:
    _rotate_times(grid, before)
    try:
        return move_up(grid)
    finally:
        _rotate_times(grid, 4 - before)

def move_left(grid: Grid) -> Tuple[int, bool]:
    return _move_rotated(grid, 1)

def move_down(grid: Grid) -> Tuple[int, bool]:
    return _move_rotated(grid, 2)

def move_right(grid: Grid) -> Tuple[int, bool]:
    return _move_rotated(grid, 3)

_MOVES = {
    DIRECTION.UP: move_up,
    DIRECTION.LEFT: move_left,
    DIRECTION.DOWN: move_down,
    DIRECTION.RIGHT: move_right,
}

def process_move(grid: Grid, direction: DIRECTION) -> Tuple[int, bool]:
    """
    Processes a move in the specified direction, mutating the grid in place.
    Args:
        grid (Grid): The current game board.
        direction (DIRECTION): The direction to move.
    Returns:
        Tuple[int, bool]:
            - The score gained from this move.
            - A boolean indicating if the board changed as a result of the move.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    move = _MOVES.get(direction)
    if move is None:
        raise ValueError("Invalid direction specified for process_move.")
    score_gained, changed = move(grid)
    logger.debug("move %s: changed=%s score=+%d", direction.name, changed, score_gained)
    return score_gained, changed

# --- Tile Spawning ---

def add_random_tile(grid: Grid, rng: random.Random) -> bool:
    """
    Adds a new tile (90% chance of rank 1, 10% chance of rank 2) to a random empty cell.
    Args:
        grid (Grid): The current game board, mutated in place.
        rng (random.Random): Generator owned by the caller, seeded once.
    Returns:
        bool: True if a tile was added, False if the grid had no empty cell.
    """
    empty_cells = grid.empty_cells()
    if not empty_cells:
        return False
    x, y = rng.choice(empty_cells)
    rank = 2 if rng.random() < 0.1 else 1
    grid.cells[x][y] = rank
    logger.debug("spawned rank %d at (%d, %d)", rank, x, y)
    return True

def initialize_board(grid: Grid, rng: random.Random) -> Grid:
    """Clears the grid and seeds it with two random tiles."""
    grid.clear()
    add_random_tile(grid, rng)
    add_random_tile(grid, rng)
    return grid

# --- Game State Checks ---

def has_vertical_pair(grid: Grid) -> bool:
    """True if some cell has the same rank as the cell below it."""
    n = grid.size
    for x in range(n):
        for y in range(n - 1):
            if grid.cells[x][y] == grid.cells[x][y + 1]:
                return True
    return False

def has_horizontal_pair(grid: Grid) -> bool:
    """True if some cell has the same rank as the cell to its right."""
    n = grid.size
    for y in range(n):
        for x in range(n - 1):
            if grid.cells[x][y] == grid.cells[x + 1][y]:
                return True
    return False

def is_game_over(grid: Grid) -> bool:
    """
    Checks whether no move can change the board.
    Args:
        grid (Grid): The game board; it is not modified.
    Returns:
        bool: True if the grid is full and no adjacent pair shares a rank.
    """
    if grid.count_empty() > 0:
        return False
    return not has_vertical_pair(grid) and not has_horizontal_pair(grid)
