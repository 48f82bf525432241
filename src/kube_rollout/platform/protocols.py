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
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class InstallerKind(str, Enum):
    """How a service is brought into the cluster."""

    CR = "cr"  # submit the custom resource, let the operator reconcile it
    CLI = "cli"  # run the installer command line with derived flags


@dataclass(frozen=True)
class DeploymentObservation:
    """Point-in-time replica counts of a deployment."""

    replicas: int
    available_replicas: int

    def converged(self, desired: int) -> bool:
        return self.replicas == desired and self.available_replicas == desired


@runtime_checkable
class ClusterClient(Protocol):
    """Subset of the cluster API the orchestrator relies on."""

    def create_if_not_exists(self, manifest: dict[str, Any]) -> bool:
        """Create the object unless it already exists. Return True if created."""
        ...

    def get_deployment(self, namespace: str, name: str) -> DeploymentObservation | None:
        """Return the deployment's replica counts, or None if it does not exist."""
        ...


@runtime_checkable
class CommandRunner(Protocol):
    def execute(self, namespace: str, tokens: Sequence[str]) -> str:
        """Run the installer CLI against `namespace` and return its output.

        Raises CommandError on a non-zero exit.
        """
        ...


@runtime_checkable
class PlatformDetector(Protocol):
    def is_enriched_platform(self) -> bool:
        """True when the platform routes traffic into services natively."""
        ...


@runtime_checkable
class ServiceExposer(Protocol):
    def expose(self, descriptor: Any) -> None: ...
