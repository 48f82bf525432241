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

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

API_VERSION = "app.kiegroup.org/v1alpha1"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ObjectMeta(_CamelModel):
    name: str
    namespace: str
    labels: dict[str, str] = Field(default_factory=dict)


class PersistenceProperties(_CamelModel):
    """Connection to the persistence store (Infinispan)."""

    uri: str = ""
    use_shared_infra: bool = Field(default=False, alias="useKogitoInfra")


class EventsProperties(_CamelModel):
    """Connection to the event backbone (Kafka).

    Either an external bootstrap URI or the name of a Kafka instance already
    running in the namespace counts as an explicit endpoint.
    """

    external_uri: str = ""
    instance: str = ""
    use_shared_infra: bool = Field(default=False, alias="useKogitoInfra")


class ServiceSpec(_CamelModel):
    replicas: int = Field(default=1, ge=0)
    image: str = ""
    insecure_image_registry: bool = False
    http_port: int = 8080
    env: dict[str, str] = Field(default_factory=dict)
    # Capabilities: None means the service kind does not support it
    persistence: PersistenceProperties | None = Field(default=None, alias="infinispan")
    events: EventsProperties | None = Field(default=None, alias="kafka")


class Condition(_CamelModel):
    type: str
    status: str
    reason: str = ""
    message: str = ""


class ServiceStatus(_CamelModel):
    conditions: list[Condition] = Field(default_factory=list)


class ServiceKind(str, Enum):
    """Kinds of service the orchestrator knows how to deploy."""

    RUNTIME = "runtime"
    DATA_INDEX = "data-index"
    JOBS_SERVICE = "jobs-service"
    MGMT_CONSOLE = "mgmt-console"

    @property
    def resource_kind(self) -> str:
        return _RESOURCE_KINDS[self]

    @property
    def supports_persistence(self) -> bool:
        return self is not ServiceKind.MGMT_CONSOLE

    @property
    def supports_events(self) -> bool:
        return self is not ServiceKind.MGMT_CONSOLE


_RESOURCE_KINDS = {
    ServiceKind.RUNTIME: "KogitoRuntime",
    ServiceKind.DATA_INDEX: "KogitoDataIndex",
    ServiceKind.JOBS_SERVICE: "KogitoJobsService",
    ServiceKind.MGMT_CONSOLE: "KogitoMgmtConsole",
}


class ServiceResource(_CamelModel):
    """Custom resource submitted to the cluster by the `cr` installer."""

    api_version: str = API_VERSION
    kind: str
    metadata: ObjectMeta
    spec: ServiceSpec
    status: ServiceStatus = Field(default_factory=ServiceStatus)

    def to_manifest(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ServiceDescriptor(BaseModel):
    """A service to deploy, plus the test-level switches that shape it.

    `enable_persistence` and `enable_events` express what the scenario wants;
    the resource spec holds what has actually been configured so far.
    """

    resource: ServiceResource
    enable_persistence: bool = False
    enable_events: bool = False

    @property
    def name(self) -> str:
        return self.resource.metadata.name

    @property
    def namespace(self) -> str:
        return self.resource.metadata.namespace

    @property
    def spec(self) -> ServiceSpec:
        return self.resource.spec

    @property
    def replicas(self) -> int:
        return self.resource.spec.replicas
