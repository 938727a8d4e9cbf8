#
# Command runner base, the plugin entry point builds on it.
#
# protoc owns stdout, it reads the CodeGeneratorResponse from it, so all
# logging goes to stderr.
#

import argparse
import logging
import sys
from functools import cached_property, wraps
from typing import Callable, Optional, Tuple, Type, Union

from frozendict import frozendict

import coloredlogs
import verboselogs

LOG_LEVELS = frozendict(
    debug=logging.DEBUG, info=logging.INFO, warn=logging.WARN, error=logging.ERROR)
DEFAULT_LOG_LEVEL = "info"
LOG_FMT = "%(name)s %(levelname)s %(message)s"
LOG_FIELD_STYLES = frozendict(
    name=frozendict(color="blue"), levelname=frozendict(color="cyan", bold=True))
LOG_LEVEL_STYLES = frozendict(
    debug=frozendict(color="green"),
    info=frozendict(color="white"),
    warning=frozendict(color="yellow", bold=True),
    error=frozendict(color="red", bold=True),
    critical=frozendict(color="red", bold=True))

Errors = Union[Type[Exception], Tuple[Type[Exception], ...]]


def catches(errors: Errors) -> Callable:
    """Method decorator turning the given errors into an exit code of 1.

    The error message is logged with the runner's logger, any other error
    propagates.

    ```python

    class MyRunner(runner.Runner):

        @runner.catches((MyError, OSError))
        def run(self):
            ...
    ```
    """

    def wrapper(fun: Callable) -> Callable:

        @wraps(fun)
        def wrapped(self, *args, **kwargs) -> Optional[int]:
            try:
                return fun(self, *args, **kwargs)
            except errors as e:
                self.log.error(str(e) or repr(e))
                return 1

        wrapped.__catches__ = errors
        return wrapped

    return wrapper


class Runner(object):
    """Callable command, subclasses implement `run`.

    Returns the exit code of `run` when called.
    """

    def __init__(self, *args):
        self._args = args

    def __call__(self) -> Optional[int]:
        return self.run()

    @cached_property
    def args(self) -> argparse.Namespace:
        # protoc passes no arguments to plugins, unknown ones are ignored
        return self.parser.parse_known_args(self._args)[0]

    @cached_property
    def log(self) -> logging.Logger:
        """Logger named after the runner, colored output on stderr."""
        verboselogs.install()
        logger = logging.getLogger(self.name)
        logger.setLevel(self.log_level)
        coloredlogs.install(
            level="DEBUG",
            logger=logger,
            stream=sys.stderr,
            fmt=LOG_FMT,
            field_styles=LOG_FIELD_STYLES,
            level_styles=LOG_LEVEL_STYLES)
        return logger

    @cached_property
    def log_level(self) -> int:
        return LOG_LEVELS[self.args.log_level]

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @cached_property
    def parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog=self.name, allow_abbrev=False)
        self.add_arguments(parser)
        return parser

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Override to add arguments, calling super to keep `--log-level`."""
        parser.add_argument(
            "--log-level",
            "-l",
            choices=list(LOG_LEVELS),
            default=DEFAULT_LOG_LEVEL,
            help="Log level to display")

    def run(self) -> Optional[int]:
        """Subclasses must implement this, returning the exit code."""
        raise NotImplementedError
