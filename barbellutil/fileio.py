"""File existence checks, a yes/no prompt and token splitting."""

from __future__ import annotations

import os
from typing import Iterator


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return True if ``path`` names an existing file that is not a directory.

    A missing path gives False; any other OS error propagates.
    """
    try:
        info = os.stat(path)
    except FileNotFoundError:
        return False
    return not os.path.isdir(path) and info is not None


def yn_question(question: str) -> bool:
    """Ask a yes/no question on stdin until a single Y or N is given."""
    while True:
        answer = input(f"{question}? (Y/N) ")
        if len(answer) == 1 and answer in "yYnN":
            return answer in "yY"


def split_tokens(text: str, token: str) -> Iterator[str]:
    """Yield the pieces of ``text`` separated by ``token``.

    A trailing empty piece after a final separator is not yielded.
    """
    if not token:
        raise ValueError("Token must not be empty.")
    pieces = text.split(token)
    if pieces[-1] == "":
        pieces.pop()
    yield from pieces