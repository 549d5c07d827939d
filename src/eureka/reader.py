"""
Line input for Eureka prompts.
"""

import sys
from typing import TextIO


class Reader:
    """Reads answers to prompts, one line at a time."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdin

    def read_input(self) -> str:
        """
        Read one line, stripped.

        Raises EOFError once the stream is exhausted so a closed stdin can't
        spin a prompt loop forever.
        """
        line = self.stream.readline()
        if not line:
            raise EOFError("No more input")
        return line.strip()
