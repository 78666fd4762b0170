# cli_driver.py
# Terminal front end: run this file to play 2048 in the console.

from typing import Callable, List, Optional, Sequence, TextIO, Tuple
import argparse
import logging
import signal
import sys
import time

from pydantic import ValidationError

import core
from api import ColorScheme, GameProgressState, GameSession, GameSettings
from keypress import Key, RawTerminal, read_key

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

TILE_WIDTH = 7

HIDE_CURSOR_AND_CLEAR = "\033[?25l\033[2J"
SHOW_CURSOR_AND_RESET = "\033[?25h\033[m"
CURSOR_HOME = "\033[H"
CURSOR_LINE_UP = "\033[A"
RESET_MODES = "\033[m"

# (background, foreground) per rank, 256-color codes. Ranks past 15 wrap around.
COLOR_SCHEMES = {
    ColorScheme.ORIGINAL: [
        (8, 255), (1, 255), (2, 255), (3, 255), (4, 255), (5, 255), (6, 255), (7, 255),
        (9, 0), (10, 0), (11, 0), (12, 0), (13, 0), (14, 0), (255, 0), (255, 0),
    ],
    ColorScheme.BLACKWHITE: [
        (232, 255), (234, 255), (236, 255), (238, 255), (240, 255), (242, 255), (244, 255), (246, 0),
        (248, 0), (249, 0), (250, 0), (251, 0), (252, 0), (253, 0), (254, 0), (255, 0),
    ],
    ColorScheme.BLUERED: [
        (235, 255), (63, 255), (57, 255), (93, 255), (129, 255), (165, 255), (201, 255), (200, 255),
        (199, 255), (198, 255), (197, 255), (196, 255), (196, 255), (196, 255), (196, 255), (196, 255),
    ],
}

KEY_DIRECTIONS = {
    Key.UP: core.DIRECTION.UP,
    Key.DOWN: core.DIRECTION.DOWN,
    Key.LEFT: core.DIRECTION.LEFT,
    Key.RIGHT: core.DIRECTION.RIGHT,
}

# Slide reference table, ranks: input line, expected line, expected points.
SLIDE_REFERENCE: List[Tuple[List[int], List[int], int]] = [
    ([0, 0, 0, 1], [1, 0, 0, 0], 0),
    ([0, 0, 1, 1], [2, 0, 0, 0], 4),
    ([0, 1, 0, 1], [2, 0, 0, 0], 4),
    ([1, 0, 0, 1], [2, 0, 0, 0], 4),
    ([1, 0, 1, 0], [2, 0, 0, 0], 4),
    ([1, 1, 1, 0], [2, 1, 0, 0], 4),
    ([1, 0, 1, 1], [2, 1, 0, 0], 4),
    ([1, 1, 0, 1], [2, 1, 0, 0], 4),
    ([1, 1, 1, 1], [2, 2, 0, 0], 8),
    ([2, 2, 1, 1], [3, 2, 0, 0], 12),
    ([1, 1, 2, 2], [2, 3, 0, 0], 12),
    ([3, 0, 1, 1], [3, 2, 0, 0], 4),
    ([2, 0, 1, 1], [2, 2, 0, 0], 4),
]

# --- Rendering ---

def tile_colors(rank: int, scheme: ColorScheme) -> Tuple[int, int]:
    """Returns (foreground, background) color codes for a rank."""
    table = COLOR_SCHEMES[scheme]
    background, foreground = table[rank % len(table)]
    return foreground, background

def format_tile(rank: int) -> str:
    """Centres a tile's value in a TILE_WIDTH wide cell."""
    if rank == 0:
        return "   ·   "
    number = str(1 << rank)
    t = TILE_WIDTH - len(number)
    return " " * (t - t // 2) + number + " " * (t // 2)

def render_board(state_board: List[List[int]], score: int, scheme: ColorScheme) -> str:
    """
    Builds the full screen for a board.
    Args:
        state_board (List[List[int]]): Ranks, row-major, top row first.
        score (int): Score shown in the header.
        scheme (ColorScheme): Tile colors.
    Returns:
        str: Screen text including ANSI color codes, starting at the cursor home.
    """
    lines = [CURSOR_HOME + f"2048.py {score:17d} pts", ""]
    for row in state_board:
        for part in ("pad", "value", "pad"):
            line = ""
            for rank in row:
                fg, bg = tile_colors(rank, scheme)
                text = format_tile(rank) if part == "value" else " " * TILE_WIDTH
                line += f"\033[38;5;{fg};48;5;{bg}m" + text + RESET_MODES
            lines.append(line)
    lines.append("")
    lines.append("        ←,↑,→,↓ or q        ")
    return "\n".join(lines) + "\n" + CURSOR_LINE_UP

def draw(session: GameSession, out: TextIO) -> None:
    state = session.snapshot()
    out.write(render_board(state.board, state.score, session.settings.scheme))
    out.flush()

# --- Self test ---

def run_self_test(out: Optional[TextIO] = None) -> bool:
    """
    Runs the slide reference table through core.slide_line.
    Returns:
        bool: True if every line and score matched.
    """
    out = out if out is not None else sys.stdout
    for line_in, expected, points in SLIDE_REFERENCE:
        line, score, _ = core.slide_line(list(line_in))
        if line != expected or score != points:
            out.write(
                f"{' '.join(map(str, line_in))} => {' '.join(map(str, line))} ({score} points) "
                f"expected {' '.join(map(str, line_in))} => {' '.join(map(str, expected))} ({points} points)\n"
            )
            return False
    out.write(f"All {len(SLIDE_REFERENCE)} tests executed successfully\n")
    return True

# --- Interaction loop ---

def _confirm(prompt: str, out: TextIO, key_reader: Callable[[], Optional[Key]]) -> bool:
    out.write(prompt + "\n")
    out.flush()
    return key_reader() == Key.YES

def play(session: GameSession, out: TextIO,
         key_reader: Callable[[], Optional[Key]] = read_key,
         sleep: Callable[[float], None] = time.sleep) -> None:
    """
    Reads keys and drives the session until the game ends or the player quits.
    """
    def show_slide() -> None:
        draw(session, out)
        sleep(session.settings.spawn_delay)

    draw(session, out)
    while True:
        key = key_reader()
        if key is None:
            out.write("\nError! Cannot read keyboard input!\n")
            logger.error("keyboard input closed")
            break

        direction = KEY_DIRECTIONS.get(key)
        if direction is not None:
            result = session.apply_move(direction, before_spawn=show_slide)
            if result.changed:
                draw(session, out)
                if session.progress == GameProgressState.GAME_OVER:
                    out.write("         GAME OVER          \n")
                    break
        elif key == Key.QUIT:
            if _confirm("        QUIT? (y/n)         ", out, key_reader):
                break
            draw(session, out)
        elif key == Key.RESTART:
            if _confirm("       RESTART? (y/n)       ", out, key_reader):
                session.restart()
            draw(session, out)

# --- Command line ---

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="2048",
        description="Play the game 2048 in the console.",
        epilog="Modes: bluered and blackwhite pick a 256-color scheme; "
               "test runs the built-in slide checks.",
    )
    parser.add_argument("mode", nargs="?", choices=["blackwhite", "bluered", "test"],
                        help="Color scheme, or 'test' to run the self test.")
    parser.add_argument("-v", "--version", action="version",
                        version=f"2048.py version {__version__}")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for tile spawning, for a repeatable game.")
    parser.add_argument("--delay", type=float, default=0.15,
                        help="Seconds to pause between a slide and the new tile.")
    parser.add_argument("--log-file", type=str, default=None,
                        help="Write a debug log to this file.")
    return parser

def log_setup(log_file: Optional[str]) -> None:
    # stdout holds the board; logs go to a file only.
    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )

def settings_from_args(args: argparse.Namespace) -> GameSettings:
    scheme = ColorScheme(args.mode) if args.mode in ("blackwhite", "bluered") else ColorScheme.ORIGINAL
    return GameSettings(scheme=scheme, seed=args.seed, spawn_delay=args.delay)

def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    log_setup(args.log_file)

    if args.mode == "test":
        return 0 if run_self_test() else 1

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    session = GameSession(settings)
    out = sys.stdout
    out.write(HIDE_CURSOR_AND_CLEAR)

    with RawTerminal() as terminal:
        def on_interrupt(signum, frame):
            out.write("         TERMINATED         \n")
            terminal.restore()
            out.write(SHOW_CURSOR_AND_RESET)
            out.flush()
            sys.exit(signum)

        previous_handler = signal.signal(signal.SIGINT, on_interrupt)
        try:
            play(session, out)
        finally:
            signal.signal(signal.SIGINT, previous_handler)
            out.write(SHOW_CURSOR_AND_RESET)
            out.flush()
    logger.info("exited with score %d", session.get_score())
    return 0


if __name__ == "__main__":
    sys.exit(main())
