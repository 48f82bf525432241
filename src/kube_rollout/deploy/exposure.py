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

from dataclasses import dataclass, field
from typing import Any

from kube_rollout.config.settings import get_settings
from kube_rollout.exceptions import ClusterClientError, ExposureError
from kube_rollout.helpers.logger import setup_logger
from kube_rollout.models.service import ServiceDescriptor
from kube_rollout.platform.protocols import ClusterClient, PlatformDetector, ServiceExposer

logger = setup_logger(__name__)


def ingress_host(descriptor: ServiceDescriptor, domain_suffix: str, local_cluster: bool) -> str:
    if local_cluster:
        return descriptor.name
    return f"{descriptor.name}.{descriptor.namespace}.{domain_suffix}"


def new_ingress_manifest(descriptor: ServiceDescriptor, host: str) -> dict[str, Any]:
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": {
            "name": descriptor.name,
            "namespace": descriptor.namespace,
        },
        "spec": {
            "rules": [
                {
                    "host": host,
                    "http": {
                        "paths": [
                            {
                                "path": "/",
                                "pathType": "Prefix",
                                "backend": {
                                    "service": {
                                        "name": descriptor.name,
                                        "port": {"number": descriptor.spec.http_port},
                                    }
                                },
                            }
                        ]
                    },
                }
            ]
        },
    }


@dataclass
class IngressExposer:
    """Exposes a service through an Ingress on plain Kubernetes."""

    cluster: ClusterClient
    domain_suffix: str = field(default_factory=lambda: get_settings().domain_suffix)
    local_cluster: bool = field(default_factory=lambda: get_settings().local_cluster)

    def expose(self, descriptor: ServiceDescriptor) -> None:
        host = ingress_host(descriptor, self.domain_suffix, self.local_cluster)
        try:
            self.cluster.create_if_not_exists(new_ingress_manifest(descriptor, host))
        except ClusterClientError as e:
            raise ExposureError(
                f"Failed to expose service '{descriptor.name}' on host {host}"
            ) from e
        logger.info(f"Service [cyan]{descriptor.name}[/cyan] exposed on http://{host}")


@dataclass
class PostDeployHook:
    """Runs once after a successful install.

    OpenShift creates routes for services on its own; plain Kubernetes needs
    an explicit ingress.
    """

    platform: PlatformDetector
    exposer: ServiceExposer

    def on_service_deployed(self, descriptor: ServiceDescriptor) -> None:
        if self.platform.is_enriched_platform():
            logger.debug(f"Skipping exposure of {descriptor.name}: routes are native")
            return
        self.exposer.expose(descriptor)
