from enum import Enum
from typing import Callable, List, Optional
import logging
import random

from pydantic import BaseModel, Field

import core

logger = logging.getLogger(__name__)


class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    PLAYING = 1
    GAME_OVER = 2


class ColorScheme(str, Enum):
    """Tile color schemes available to the terminal renderer."""
    ORIGINAL = "original"
    BLACKWHITE = "blackwhite"
    BLUERED = "bluered"

# --- Pydantic Models for session settings and results ---

class GameSettings(BaseModel):
    """Settings for a game session and its terminal front end."""
    scheme: ColorScheme = Field(
        default=ColorScheme.ORIGINAL,
        description="Tile color scheme used when drawing the board."
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the tile spawner. None seeds from system entropy."
    )
    spawn_delay: float = Field(
        default=0.15,
        ge=0,
        description="Seconds to show the slid board before the new tile appears."
    )


class MoveResult(BaseModel):
    """Outcome of one directional input."""
    changed: bool = Field(..., description="True if any tile moved or merged.")
    score_delta: int = Field(..., ge=0, description="Points gained by the move's merges.")


class GameStateData(BaseModel):
    """Read-only snapshot of a session, for renderers."""
    board: List[List[int]] = Field(..., description="Ranks, row-major, top row first.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    progress: GameProgressState = Field(..., description="PLAYING or GAME_OVER.")
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")

# --- Session ---

class GameSession:
    """
    Live game state: one grid and one score, driven by player input.

    The spawner's generator is created once per session from `settings.seed`;
    restarting reuses it. Passing `rng` supplies the generator directly; it
    cannot be combined with a seed.
    """

    def __init__(self, settings: Optional[GameSettings] = None, rng: Optional[random.Random] = None):
        self.settings = settings or GameSettings()
        if rng is not None and self.settings.seed is not None:
            raise ValueError("Pass either settings.seed or rng, not both.")
        self.rng = rng if rng is not None else random.Random(self.settings.seed)
        self.grid = core.Grid(core.SIZE)
        self.score = 0
        self.progress = GameProgressState.PLAYING
        self.restart()

    def restart(self) -> None:
        core.initialize_board(self.grid, self.rng)
        self.score = 0
        self.progress = GameProgressState.PLAYING
        logger.info("new game started")

    def apply_move(self, direction: core.DIRECTION,
                   before_spawn: Optional[Callable[[], None]] = None) -> MoveResult:
        """
        Slides the board and, if anything changed, spawns a tile and checks for game over.

        `before_spawn` runs after the slide and before the spawn; the terminal
        front end uses it to show the slid board for a moment.
        """
        if self.progress == GameProgressState.GAME_OVER:
            return MoveResult(changed=False, score_delta=0)

        score_delta, changed = core.process_move(self.grid, direction)
        if not changed:
            return MoveResult(changed=False, score_delta=0)

        self.score += score_delta
        if before_spawn is not None:
            before_spawn()
        self.spawn_tile()
        if self.is_game_over():
            self.progress = GameProgressState.GAME_OVER
            logger.info("game over with score %d", self.score)
        return MoveResult(changed=True, score_delta=score_delta)

    def spawn_tile(self) -> None:
        core.add_random_tile(self.grid, self.rng)

    def is_game_over(self) -> bool:
        return core.is_game_over(self.grid)

    def get_cell(self, x: int, y: int) -> int:
        return self.grid.get(x, y)

    def get_score(self) -> int:
        return self.score

    def grid_size(self) -> int:
        return self.grid.size

    def snapshot(self) -> GameStateData:
        return GameStateData(
            board=self.grid.rows(),
            score=self.score,
            progress=self.progress,
            board_size=self.grid.size,
        )
