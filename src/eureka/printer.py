"""
Terminal output for Eureka.
"""

from rich.console import Console


class Printer:
    """Colored output on top of a rich Console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)

    def banner(self) -> None:
        """Greeting shown before first-run setup."""
        self.console.print("#" * 50, style="yellow")
        self.console.print("Welcome to eureka!", style="bold yellow")
        self.console.print("Let's get you set up.", style="yellow")
        self.console.print("#" * 50, style="yellow")

    def input_header(self, text: str) -> None:
        self.console.print(text, style="bold green", end=" ", markup=False)

    def println(self, text: str) -> None:
        self.console.print(text, markup=False)

    def success(self, text: str) -> None:
        self.console.print(text, style="green", markup=False)

    def error(self, text: str) -> None:
        self.console.print(text, style="bold red", markup=False)
