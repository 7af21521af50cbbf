"""
Post-processing step applied to the generated file.

The emitter only knows the Formatter call signature, so rendering can be
exercised without gofmt on the PATH.
"""

import shlex
import subprocess
from pathlib import Path
from typing import Protocol, Sequence, Union

from .errors import FormatterError
from .logger import get_logger

DEFAULT_FORMATTER = "gofmt -s -w"


class Formatter(Protocol):
    def __call__(self, path: Path) -> None:
        ...


class CommandFormatter:
    """
    Run an external formatter that rewrites the file in place.

    The output path is appended as the last argument.
    """

    def __init__(self, command: Union[str, Sequence[str]] = DEFAULT_FORMATTER):
        if isinstance(command, str):
            command = shlex.split(command)
        if not command:
            raise ValueError("formatter command must not be empty")
        self.command = list(command)

    def __call__(self, path: Path) -> None:
        logger = get_logger()
        argv = self.command + [str(path)]
        logger.debug("Running formatter", command=argv)
        try:
            subprocess.run(argv, check=True, capture_output=True, text=True)
        except FileNotFoundError as e:
            raise FormatterError(
                f"formatter not found: {self.command[0]}", command=argv
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            message = f"{' '.join(argv)}: exit status {e.returncode}"
            if stderr:
                message = f"{message}: {stderr}"
            raise FormatterError(message, command=argv, stderr=stderr) from e
        logger.record_formatter_run()

    def __repr__(self) -> str:
        return f"CommandFormatter({self.command!r})"


class NoopFormatter:
    """Leave the generated file as rendered."""

    def __call__(self, path: Path) -> None:
        get_logger().debug("Formatting skipped", path=str(path))
