"""
Terminal output for krlib.

All progress and status messages go through the rich consoles defined here.
Messages are printed literally (no markup), so prompts such as ``[y]`` are
shown as typed.
"""

from rich.console import Console

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)

LOGO = (
    "    __ __         __    _ __                         \n"
    "   / //_/_____   / /   (_) /_  _________ ________  __\n"
    "  / ,<  / ___/  / /   / / __ \\/ ___/ __ `/ ___/ / / /\n"
    " / /| |/ /     / /___/ / /_/ / /  / /_/ / /  / /_/ / \n"
    "/_/ |_/_/     /_____/_/_.___/_/   \\__,_/_/   \\__, /  \n"
    "                                            /____/   \n"
)


def info(message: str) -> None:
    console.print(message, markup=False, soft_wrap=True)


def success(message: str) -> None:
    console.print(message, style="green", markup=False, soft_wrap=True)


def warning(message: str) -> None:
    console.print(message, style="yellow", markup=False, soft_wrap=True)


def error(message: str) -> None:
    error_console.print(message, style="red", markup=False, soft_wrap=True)


def show_logo() -> None:
    info(LOGO)
