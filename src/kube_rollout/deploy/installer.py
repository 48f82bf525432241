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

from dataclasses import dataclass

from kube_rollout.deploy.exposure import PostDeployHook
from kube_rollout.deploy.flags import service_cli_flags
from kube_rollout.deploy.wiring import apply_shared_infra_rules
from kube_rollout.exceptions import (
    ClusterClientError,
    CommandError,
    InstallationFailure,
    UnknownInstallerError,
)
from kube_rollout.helpers.logger import setup_logger
from kube_rollout.models.service import ServiceDescriptor
from kube_rollout.platform.protocols import ClusterClient, CommandRunner, InstallerKind

logger = setup_logger(__name__)

INSTALL_VERB = "install"
DEPLOY_VERB = "deploy"


@dataclass
class ServiceInstaller:
    """Brings a service into the cluster with one of the two installers.

    Typical flow:
    >>> installer = ServiceInstaller(cluster=..., runner=..., hook=...)
    >>> installer.deploy(descriptor, InstallerKind.CR)
    >>> wait_for_service(cluster, descriptor.namespace, descriptor.name, descriptor.replicas)

    `cr` submits the custom resource after wiring missing infra endpoints to
    the shared infrastructure; `cli` runs the installer command line and lets
    it make that decision. Either way the post-deploy hook runs once on
    success. Nothing is rolled back on failure.
    """

    cluster: ClusterClient
    runner: CommandRunner
    hook: PostDeployHook

    def install(
        self,
        descriptor: ServiceDescriptor,
        installer_kind: InstallerKind,
        cli_deployment_name: str,
    ) -> None:
        """Install the service; with `cli`, under `cli_deployment_name`."""
        self._install_or_deploy(descriptor, installer_kind, INSTALL_VERB, cli_deployment_name)

    def deploy(self, descriptor: ServiceDescriptor, installer_kind: InstallerKind) -> None:
        """Deploy the service under its own name."""
        self._install_or_deploy(descriptor, installer_kind, DEPLOY_VERB, descriptor.name)

    def _install_or_deploy(
        self,
        descriptor: ServiceDescriptor,
        installer_kind: InstallerKind,
        cli_verb: str,
        cli_deployment_name: str,
    ) -> None:
        if installer_kind not in (InstallerKind.CLI, InstallerKind.CR):
            raise UnknownInstallerError(installer_kind)
        kind = InstallerKind(installer_kind)
        logger.info(f"{descriptor.name} install {kind.value} with {descriptor.replicas} replicas")

        if kind is InstallerKind.CLI:
            self._cli_install(descriptor, cli_verb, cli_deployment_name)
        else:
            apply_shared_infra_rules(descriptor)
            self._cr_install(descriptor)

        self.hook.on_service_deployed(descriptor)

    def _cr_install(self, descriptor: ServiceDescriptor) -> None:
        try:
            created = self.cluster.create_if_not_exists(descriptor.resource.to_manifest())
        except ClusterClientError as e:
            raise InstallationFailure(descriptor.name, InstallerKind.CR.value) from e
        if not created:
            logger.info(f"Service [cyan]{descriptor.name}[/cyan] already present, nothing to do")

    def _cli_install(
        self, descriptor: ServiceDescriptor, cli_verb: str, cli_deployment_name: str
    ) -> None:
        cmd = cli_command(descriptor, cli_verb, cli_deployment_name)
        try:
            self.runner.execute(descriptor.namespace, cmd)
        except CommandError as e:
            raise InstallationFailure(
                descriptor.name, InstallerKind.CLI.value, output=e.output
            ) from e


def cli_command(
    descriptor: ServiceDescriptor, cli_verb: str, cli_deployment_name: str
) -> list[str]:
    return [cli_verb, cli_deployment_name, *service_cli_flags(descriptor)]
