# Copyright 2025 iGenius S.p.A
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler


def _rich_handler(console: Console, level: int, tracebacks: bool) -> RichHandler:
    return RichHandler(
        level=level,
        console=console,
        rich_tracebacks=tracebacks,
        markup=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )


def _resolve_level(level: int | str | None) -> int | str:
    if level is not None:
        return level
    from kube_rollout.config.settings import get_settings

    return get_settings().log_level.upper()


def setup_logger(
    name: str = "kube_rollout",
    level: int | str | None = None,
    console: Console | None = None,
    to_stderr: bool = False,
) -> logging.Logger:
    """Return a rich-backed logger.

    INFO and below go to stdout, WARNING and above to stderr. When stdout is
    not a terminal (CI runs, piped output) everything goes to stderr so that
    command output stays machine readable.
    """
    to_stderr = to_stderr or not sys.stdout.isatty()

    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logger.propagate = False

    if logger.handlers:
        return logger

    stderr_console = Console(stderr=True)

    if to_stderr:
        logger.addHandler(_rich_handler(stderr_console, logging.NOTSET, tracebacks=True))
        return logger

    stdout_handler = _rich_handler(console or Console(), logging.DEBUG, tracebacks=False)
    stdout_handler.addFilter(lambda record: record.levelno <= logging.INFO)

    logger.addHandler(stdout_handler)
    logger.addHandler(_rich_handler(stderr_console, logging.WARNING, tracebacks=True))
    return logger
