"""
Gymnasium environment wrapper for Minesweeper.

Lets scripted players and agents drive the engine through a standard
step/reset interface.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig, GameStatus, EASY


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 2 * rows * columns.
        Action i < rows * columns reveals cell (i // columns, i % columns);
        the second half toggles a flag on the same cells.

    Rewards:
        - +1 for a move that changed the board
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for a move that was ignored
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: Easy preset).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or EASY
        self.board = Board(self.config)
        self.render_mode = render_mode
        self._cells = self.config.total_cells

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.rows, self.config.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(2 * self._cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game on a fresh board.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        board_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.board = Board(
            BoardConfig(
                self.config.rows,
                self.config.columns,
                self.config.num_mines,
                self.config.win_rule,
                board_seed,
            )
        )
        self._steps = 0
        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to reveal, or cell index plus
                rows * columns to flag.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        reward = self._apply(int(action))
        terminated = self.board.is_finished
        return (
            self.board.get_observation(),
            reward,
            terminated,
            False,
            self._get_info(),
        )

    def _action_to_move(self, action: int) -> Tuple[bool, int, int]:
        """Convert a flat action to (is_flag, row, col)."""
        is_flag = action >= self._cells
        row, col = self.board.position_of(action % self._cells)
        return is_flag, row, col

    def _apply(self, action: int) -> float:
        """Perform the move and score it."""
        is_flag, row, col = self._action_to_move(action)
        if is_flag:
            changes = self.board.flag(row, col)
        else:
            changes = self.board.reveal(row, col)

        if not changes:
            return -0.1
        if self.board.is_won:
            return 10.0
        if self.board.is_lost:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.cells_revealed,
            "remaining_mines": self.board.remaining_mines,
            "game_state": self.board.status.name,
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return render_ansi(self.board)
        if self.render_mode == "human":
            print(render_ansi(self.board))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of actions that would change the board.

        Returns:
            Boolean array where True = valid action.
        """
        obs = self.board.get_observation().flatten()
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.board.is_finished:
            return mask
        mask[: self._cells] = obs == -1
        if self.board.status == GameStatus.IN_PROGRESS:
            mask[self._cells:] = (obs == -1) | (obs == -2)
        return mask


def render_ansi(board: Any) -> str:
    """
    Render board as ASCII string.

    Accepts a Board or anything else exposing rows, columns and
    get_observation(), such as a GameController.
    """
    lines = []
    obs = board.get_observation()

    for row in range(board.rows):
        row_str = ""
        for col in range(board.columns):
            val = obs[row, col]
            if val == -1:
                row_str += "."
            elif val == -2:
                row_str += "F"
            elif val == 9:
                row_str += "*"
            elif val == 0:
                row_str += " "
            else:
                row_str += str(val)
            row_str += " "
        lines.append(row_str)

    return "\n".join(lines)
