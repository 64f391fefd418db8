"""Terminal output for the model updater.

Colour is used only when stdout is a terminal and `NO_COLOR` is unset, so
piped output and captured test output stay plain text.
"""

import os
import sys

RULE_WIDTH = 60


class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    DIM = '\033[2m'
    BOLD = '\033[1m'
    END = '\033[0m'


def use_color() -> bool:
    return sys.stdout.isatty() and not os.getenv("NO_COLOR")


def colorize(text: str, color: str) -> str:
    if use_color():
        return f"{color}{text}{Colors.END}"
    return text


def print_rule():
    print(colorize("=" * RULE_WIDTH, Colors.CYAN))


def print_header(title: str):
    """Print the run banner: title between two rules."""
    print()
    print_rule()
    print(colorize(f"  {title}", Colors.BOLD + Colors.CYAN))
    print_rule()
    print()


def print_section(title: str):
    """Print a bold section title followed by a blank line."""
    print(colorize(title, Colors.BOLD))
    print()


def _print_marked(marker: str, color: str, text: str):
    print(colorize(f"{marker} {text}", color))


def print_success(text: str):
    _print_marked("✓", Colors.GREEN, text)


def print_info(text: str):
    _print_marked("ℹ", Colors.BLUE, text)


def print_warning(text: str):
    _print_marked("⚠", Colors.YELLOW, text)


def print_error(text: str):
    _print_marked("✗", Colors.RED, text)


def print_dim(text: str):
    print(colorize(text, Colors.DIM))
