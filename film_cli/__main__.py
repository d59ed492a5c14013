"""
Entry point for ``film-cli`` and ``python -m film_cli``.

Application errors are rendered by the commands themselves and Click turns
Ctrl-C into "Aborted!"; this wrapper only reports unexpected failures.
"""

import logging
import os
import sys

from rich.console import Console

from film_cli.cli.app import app
from film_cli.cli.formatters import format_error_with_suggestions

log = logging.getLogger("film_cli")


def _force_utf8_output() -> None:
    for stream in (sys.stdout, sys.stderr):
        try:
            stream.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass


def main() -> None:
    if os.name == "nt":
        _force_utf8_output()

    console = Console(stderr=True)
    try:
        app()
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
