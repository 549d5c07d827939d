"""
CLI for Eureka.

Minimal CLI using stdlib argument handling for fast startup.
Heavy modules (pygit2, rich) are imported lazily inside main().

Usage:
    eureka                  # Capture an idea, commit and push it
    eureka --view           # Read your ideas in $PAGER
    eureka --clear-config   # Forget the stored repo and ssh key
    eureka --help           # Show help
"""

import logging
import os
import sys

logger = logging.getLogger(__name__)


def print_help() -> None:
    """Print help message."""
    print("""eureka - input and store your ideas without leaving the terminal

Usage:
    eureka                        Capture an idea, commit it and push it

Options:
    eureka --view, -v             View ideas with $PAGER (default: less)
    eureka --clear-config         Clear your stored configuration
    eureka --help, -h             Show this help
    eureka --version              Show version

Environment:
    EUREKA_REPO                   Use this repository instead of the stored one
    EUREKA_LOG                    Log level (debug, info, warning, error)

On first run eureka asks for the path to your idea repository and your
ssh key. Ideas are written to README.md, committed with the summary as
subject, and pushed to origin.""")


def print_version() -> None:
    """Print version."""
    from eureka import __version__
    print(f"eureka {__version__}")


def configure_logging() -> None:
    """Configure root logging from EUREKA_LOG."""
    level_name = os.environ.get("EUREKA_LOG", "WARNING").upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level_name, logging.WARNING),
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns the process exit status.
    """
    args = sys.argv[1:] if argv is None else argv

    clear_config = False
    view = False

    for arg in args:
        if arg in ("--help", "-h", "help"):
            print_help()
            return 0
        if arg in ("--version", "version"):
            print_version()
            return 0
        if arg == "--clear-config":
            clear_config = True
        elif arg in ("--view", "-v"):
            view = True
        else:
            print(f"Error: Unknown argument {arg!r}. See eureka --help", file=sys.stderr)
            return 2

    configure_logging()

    from eureka.app import Eureka, EurekaOptions
    from eureka.config import ConfigManager, load_config
    from eureka.errors import GitOperationError
    from eureka.git import Git
    from eureka.printer import Printer
    from eureka.program_access import ProgramAccess, ProgramError
    from eureka.reader import Reader

    printer = Printer()

    try:
        config = load_config()
        eureka = Eureka(
            config_manager=ConfigManager(),
            printer=printer,
            reader=Reader(sys.stdin),
            make_git=Git,
            program_access=ProgramAccess(config),
            config=config,
        )
        eureka.run(EurekaOptions(clear_config=clear_config, view=view))
    except (GitOperationError, ProgramError, ValueError, OSError) as e:
        logger.debug("Run failed", exc_info=True)
        printer.error(f"Error: {e}")
        return 1
    except (EOFError, KeyboardInterrupt):
        printer.error("Aborted.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
