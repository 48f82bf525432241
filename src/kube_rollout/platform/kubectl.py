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

import json
import subprocess
from typing import Any

from kube_rollout.config.settings import get_settings
from kube_rollout.exceptions import ClusterClientError
from kube_rollout.helpers.logger import setup_logger
from kube_rollout.platform.protocols import DeploymentObservation

logger = setup_logger(__name__)

ROUTE_API_VERSION = "route.openshift.io/v1"


def _is_not_found(stderr: str) -> bool:
    return "(NotFound)" in stderr


def _resource_name(manifest: dict[str, Any]) -> str:
    """`Kind.group` as accepted by `kubectl get`, e.g. `Ingress.networking.k8s.io`."""
    api_version = manifest.get("apiVersion", "")
    group = api_version.rsplit("/", 1)[0] if "/" in api_version else ""
    return f"{manifest['kind']}.{group}" if group else manifest["kind"]


class _Kubectl:
    def __init__(self, kubectl: str | None = None):
        self.kubectl = kubectl or get_settings().kubectl_path

    def _run(self, *args: str, stdin: str | None = None) -> subprocess.CompletedProcess:
        cmd = [self.kubectl, *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, input=stdin, capture_output=True, text=True, check=False)
        except OSError as e:
            raise ClusterClientError(f"Could not run {self.kubectl}: {e}") from e


class KubectlClusterClient(_Kubectl):
    """Cluster client that shells out to kubectl."""

    def create_if_not_exists(self, manifest: dict[str, Any]) -> bool:
        meta = manifest["metadata"]
        resource = _resource_name(manifest)
        ns_args = ("-n", meta["namespace"]) if meta.get("namespace") else ()

        got = self._run("get", resource, meta["name"], "-o", "name", *ns_args)
        if got.returncode == 0:
            logger.info(f"{resource} [cyan]{meta['name']}[/cyan] already exists, skipping creation")
            return False
        if not _is_not_found(got.stderr):
            raise ClusterClientError(
                f"Failed to look up {resource} {meta['name']}: {got.stderr.strip()}"
            )

        created = self._run("create", "-f", "-", stdin=json.dumps(manifest))
        if created.returncode == 0:
            logger.info(f"Created {resource} [cyan]{meta['name']}[/cyan]")
            return True
        # Lost a race against another creator: same outcome as the lookup above
        if "AlreadyExists" in created.stderr:
            return False
        raise ClusterClientError(
            f"Failed to create {resource} {meta['name']}: {created.stderr.strip()}"
        )

    def get_deployment(self, namespace: str, name: str) -> DeploymentObservation | None:
        res = self._run("get", "deployment", name, "-n", namespace, "-o", "json")
        if res.returncode != 0:
            if _is_not_found(res.stderr):
                return None
            raise ClusterClientError(
                f"Failed to get deployment {name} in {namespace}: {res.stderr.strip()}"
            )
        try:
            status = json.loads(res.stdout).get("status") or {}
        except json.JSONDecodeError as e:
            raise ClusterClientError(f"Unreadable deployment {name} in {namespace}") from e
        return DeploymentObservation(
            replicas=int(status.get("replicas", 0)),
            available_replicas=int(status.get("availableReplicas", 0)),
        )


class KubectlPlatformDetector(_Kubectl):
    """Detects OpenShift by looking for the Route API group."""

    def __init__(self, kubectl: str | None = None):
        super().__init__(kubectl)
        self._enriched: bool | None = None

    def is_enriched_platform(self) -> bool:
        if self._enriched is None:
            res = self._run("api-versions")
            if res.returncode != 0:
                raise ClusterClientError(f"Failed to list API versions: {res.stderr.strip()}")
            self._enriched = ROUTE_API_VERSION in res.stdout.split()
            logger.debug(f"OpenShift detected: {self._enriched}")
        return self._enriched
