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
from types import SimpleNamespace

from rich.logging import RichHandler

from kube_rollout.helpers import logger as mod
from kube_rollout.helpers.logger import setup_logger


def _stdout_tty(monkeypatch, tty: bool) -> None:
    monkeypatch.setattr(mod, "sys", SimpleNamespace(stdout=SimpleNamespace(isatty=lambda: tty)))


def test_setup_logger_non_tty_logs_everything_to_stderr(monkeypatch):
    _stdout_tty(monkeypatch, False)

    logger = setup_logger(name="kube_rollout.test_logger.non_tty", level=logging.INFO)

    assert logger.level == logging.INFO
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], RichHandler)


def test_setup_logger_tty_splits_stdout_and_stderr(monkeypatch):
    _stdout_tty(monkeypatch, True)

    logger = setup_logger(name="kube_rollout.test_logger.tty", level=logging.DEBUG)

    levels = sorted(h.level for h in logger.handlers)
    assert levels == [logging.DEBUG, logging.WARNING]


def test_setup_logger_level_from_settings(monkeypatch):
    monkeypatch.setenv("KUBE_ROLLOUT_LOG_LEVEL", "warning")
    from kube_rollout.config.settings import reload_settings_cache

    reload_settings_cache()

    logger = setup_logger(name="kube_rollout.test_logger.settings")

    assert logger.level == logging.WARNING


def test_setup_logger_idempotent():
    name = "kube_rollout.test_logger.idempotent"
    first = setup_logger(name=name, level=logging.INFO)
    count = len(first.handlers)

    second = setup_logger(name=name, level=logging.DEBUG)

    assert second is first
    assert len(second.handlers) == count
