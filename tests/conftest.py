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

from types import SimpleNamespace

import pytest

from kube_rollout.config.defaults import reload_defaults_cache
from kube_rollout.config.settings import reload_settings_cache
import kube_rollout.deploy.readiness as readiness
from kube_rollout.exceptions import ClusterClientError
from kube_rollout.models.builders import new_service_descriptor
from kube_rollout.models.service import ServiceKind
from kube_rollout.platform.protocols import DeploymentObservation

_IMAGE_ENV = (
    "KUBE_ROLLOUT_SERVICES_IMAGE_REGISTRY",
    "KUBE_ROLLOUT_SERVICES_IMAGE_NAMESPACE",
    "KUBE_ROLLOUT_SERVICES_IMAGE_VERSION",
    "KUBE_ROLLOUT_SERVICES_IMAGE_NAME_SUFFIX",
    "KUBE_ROLLOUT_DEFAULTS",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """No user .env, defaults.yaml or image overrides leak into tests."""
    for var in _IMAGE_ENV:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("KUBE_ROLLOUT_HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    reload_settings_cache()
    reload_defaults_cache()
    yield
    reload_settings_cache()
    reload_defaults_cache()


class FakeCluster:
    """In-memory cluster: records created manifests, replays observations."""

    def __init__(self, observations=None, existing=()):
        self.created = []
        self.existing = {tuple(k) for k in existing}
        self.observations = list(observations or [])
        self.get_calls = 0

    def create_if_not_exists(self, manifest):
        key = (manifest["kind"], manifest["metadata"]["name"])
        if key in self.existing:
            return False
        self.existing.add(key)
        self.created.append(manifest)
        return True

    def get_deployment(self, namespace, name):
        # Stick to the last observation once exhausted
        self.get_calls += 1
        if not self.observations:
            return None
        item = self.observations[min(self.get_calls - 1, len(self.observations) - 1)]
        if isinstance(item, Exception):
            raise item
        if item is None:
            return None
        return DeploymentObservation(replicas=item[0], available_replicas=item[1])


class FakeClock:
    def __init__(self, t0: float = 0.0):
        self.t = t0
        self.slept = []

    def now(self) -> float:
        return self.t

    def sleep(self, dt: float) -> None:
        self.slept.append(dt)
        self.t += dt


@pytest.fixture
def fake_cluster_cls():
    return FakeCluster


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def default_clock(monkeypatch, fake_clock):
    """Waiters built without `now`/`sleep` read and advance `fake_clock`."""
    monkeypatch.setattr(
        readiness, "time", SimpleNamespace(monotonic=fake_clock.now, sleep=fake_clock.sleep)
    )
    return fake_clock


@pytest.fixture
def cluster_error():
    return ClusterClientError("connection refused")


@pytest.fixture
def runtime_descriptor():
    return new_service_descriptor(ServiceKind.RUNTIME, "ns-test", "example-quarkus", 2)
