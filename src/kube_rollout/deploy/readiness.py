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

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import time

from kube_rollout.config.settings import get_settings
from kube_rollout.exceptions import ClusterClientError, ConvergenceTimeout, ObservationError
from kube_rollout.helpers.logger import setup_logger
from kube_rollout.platform.protocols import ClusterClient, DeploymentObservation

logger = setup_logger(__name__)


class WaitOutcome(str, Enum):
    CONVERGED = "CONVERGED"
    TIMED_OUT = "TIMED_OUT"
    OBSERVATION_ERROR = "OBSERVATION_ERROR"


@dataclass
class WaitResult:
    """Terminal state of a readiness wait.

    Attributes
    ----------
    outcome: WaitOutcome
        How the wait ended.
    last_observation: DeploymentObservation | None
        Last replica counts seen; None if the deployment never showed up.
    error: Exception | None
        The collaborator failure, for OBSERVATION_ERROR only.
    """

    outcome: WaitOutcome
    namespace: str
    name: str
    replicas: int
    last_observation: DeploymentObservation | None = None
    error: Exception | None = None

    def raise_for_outcome(self) -> None:
        if self.outcome is WaitOutcome.OBSERVATION_ERROR:
            raise ObservationError(self.namespace, self.name, self.error) from self.error
        if self.outcome is WaitOutcome.TIMED_OUT:
            raise ConvergenceTimeout(
                self.namespace, self.name, self.replicas, self.last_observation
            )


class ReadinessWaiter:
    """
    Polls a deployment until its total and available replica counts both
    equal the desired count, the deadline passes, or the cluster errors out.
    """

    def __init__(
        self,
        cluster: ClusterClient,
        *,
        poll_interval_s: float | None = None,
        now: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
        on_tick: Callable[[DeploymentObservation | None], None] | None = None,
    ):
        self.cluster = cluster
        self.poll_interval_s = poll_interval_s or get_settings().poll_interval_s
        self.now = now or time.monotonic
        self.sleep = sleep or time.sleep
        self.on_tick = on_tick

    def poll(self, namespace: str, name: str, replicas: int, timeout_s: float) -> WaitResult:
        deadline = self.now() + timeout_s
        last: DeploymentObservation | None = None

        while True:
            try:
                observed = self.cluster.get_deployment(namespace, name)
            except ClusterClientError as e:
                logger.warning(f"Giving up on {name} in {namespace}: {e}")
                return WaitResult(WaitOutcome.OBSERVATION_ERROR, namespace, name, replicas, last, e)

            if observed is not None:
                last = observed
                if observed.converged(replicas):
                    logger.info(f"[bold green]{name} running with {replicas} replicas")
                    return WaitResult(WaitOutcome.CONVERGED, namespace, name, replicas, last)
            if self.on_tick is not None:
                self.on_tick(observed)

            remaining = deadline - self.now()
            if remaining <= 0:
                return WaitResult(WaitOutcome.TIMED_OUT, namespace, name, replicas, last)
            self.sleep(min(self.poll_interval_s, remaining))

    def wait(self, namespace: str, name: str, replicas: int, timeout_s: float) -> None:
        """Like :meth:`poll`, but raises unless the deployment converged."""
        self.poll(namespace, name, replicas, timeout_s).raise_for_outcome()


def wait_for_service(
    cluster: ClusterClient,
    namespace: str,
    name: str,
    replicas: int,
    timeout_s: float | None = None,
    poll_interval_s: float | None = None,
) -> None:
    """Wait for service `name` to run `replicas` replicas.

    Raises ConvergenceTimeout or ObservationError.
    """
    if timeout_s is None:
        timeout_s = get_settings().wait_timeout_s
    logger.info(f"Waiting up to {timeout_s:g}s for {name} running in {namespace}")
    ReadinessWaiter(cluster, poll_interval_s=poll_interval_s).wait(
        namespace, name, replicas, timeout_s
    )
