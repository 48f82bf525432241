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

"""Custom exceptions."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kube_rollout.platform.protocols import DeploymentObservation


class KubeRolloutError(Exception):
    """Base class for all operational errors.

    Useful to catch all of them. Programming defects such as
    :class:`ConfigurationError` deliberately do not inherit from it.
    """


class ConfigurationError(Exception):
    """A caller handed the orchestrator a value it can never act on."""


class UnknownInstallerError(ConfigurationError):
    """Installer kind outside the known variants."""

    def __init__(self, installer_kind: object):
        """Raise the UnknownInstallerError.

        Args:
            installer_kind (object): The value that could not be dispatched.
        """
        self.installer_kind = installer_kind
        super().__init__(f"Unknown installer type {installer_kind!r}")


class ClusterClientError(KubeRolloutError):
    """The cluster API rejected a request or could not be reached."""


class CommandError(KubeRolloutError):
    """An external command exited with a non-zero status."""

    def __init__(self, cmd: Sequence[str], returncode: int, output: str):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Command '{' '.join(self.cmd)}' exited with status {returncode}: {output.strip()}"
        )


class InstallationFailure(KubeRolloutError):
    """Submitting the service to the cluster, or running the CLI, failed."""

    def __init__(self, service_name: str, strategy: str, output: str | None = None):
        """Raise the InstallationFailure.

        Args:
            service_name (str): Name of the service being installed.
            strategy (str): Installer kind that was used.
            output (str | None): Captured CLI output, when available.
        """
        self.service_name = service_name
        self.strategy = strategy
        self.output = output
        msg = f"Error installing service '{service_name}' with installer '{strategy}'"
        if output:
            msg += f"\n{output.strip()}"
        super().__init__(msg)


class ExposureError(KubeRolloutError):
    """The service could not be exposed outside the cluster."""


class ObservationError(KubeRolloutError):
    """Fetching the deployment failed while waiting for it to converge."""

    def __init__(self, namespace: str, name: str, cause: Exception | None = None):
        self.namespace = namespace
        self.name = name
        self.cause = cause
        msg = f"Could not observe deployment '{name}' in namespace '{namespace}'"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class ConvergenceTimeout(KubeRolloutError):
    """The deployment did not reach the desired replica count in time."""

    def __init__(
        self,
        namespace: str,
        name: str,
        replicas: int,
        last_observation: DeploymentObservation | None,
    ):
        self.namespace = namespace
        self.name = name
        self.replicas = replicas
        self.last_observation = last_observation
        if last_observation is None:
            seen = "deployment was never found"
        else:
            seen = (
                f"last seen replicas={last_observation.replicas}, "
                f"available={last_observation.available_replicas}"
            )
        super().__init__(
            f"Timed out waiting for service '{name}' in namespace '{namespace}' "
            f"to reach {replicas} replicas ({seen})"
        )
