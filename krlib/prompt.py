"""Line-based yes/no prompts read from stdin."""

import asyncio
import sys
from collections.abc import Callable, Sequence

from . import console
from .errors import KrlibError

YES = "y"
NO = "n"


async def ask_choice(
    read_line: Callable[[], str] | None = None,
    choices: Sequence[str] = (YES, NO),
) -> str:
    """
    Read lines until one is exactly one of ``choices``.

    Reading happens in a worker thread so the event loop is not blocked.
    Raises KrlibError when input ends before a valid answer.
    """
    if read_line is None:
        read_line = sys.stdin.readline
    while True:
        line = await asyncio.to_thread(read_line)
        if not line:
            raise KrlibError("No answer given, input was closed")
        answer = line.strip()
        if answer in choices:
            return answer
        console.warning("Invalid input")


async def confirm(read_line: Callable[[], str] | None = None) -> bool:
    return await ask_choice(read_line) == YES
