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

from collections.abc import Sequence
import subprocess

from kube_rollout.config.settings import get_settings
from kube_rollout.exceptions import CommandError
from kube_rollout.helpers.logger import setup_logger

logger = setup_logger(__name__)


class SubprocessCommandRunner:
    """Runs the installer CLI as a child process."""

    def __init__(self, cli_path: str | None = None, namespace_flag: str | None = None):
        s = get_settings()
        self.cli_path = cli_path or s.cli_path
        self.namespace_flag = namespace_flag or s.cli_namespace_flag

    def build(self, namespace: str, tokens: Sequence[str]) -> list[str]:
        return [self.cli_path, *tokens, self.namespace_flag, namespace]

    def execute(self, namespace: str, tokens: Sequence[str]) -> str:
        """
        Run the CLI and return its combined stdout/stderr.

        :raises CommandError: the CLI could not be started or exited non-zero.
        """
        cmd = self.build(namespace, tokens)
        logger.info(f"Executing CLI command: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(cmd, 127, str(e)) from e

        if result.returncode != 0:
            raise CommandError(cmd, result.returncode, result.stdout or "")
        logger.debug(result.stdout)
        return result.stdout
