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

from kube_rollout.models.image import new_image_or_default
from kube_rollout.models.service import (
    EventsProperties,
    ObjectMeta,
    PersistenceProperties,
    ServiceDescriptor,
    ServiceKind,
    ServiceResource,
    ServiceSpec,
    ServiceStatus,
)

DEFAULT_IMAGE_NAMES = {
    ServiceKind.RUNTIME: "kogito-runtime",
    ServiceKind.DATA_INDEX: "kogito-data-index-infinispan",
    ServiceKind.JOBS_SERVICE: "kogito-jobs-service",
    ServiceKind.MGMT_CONSOLE: "kogito-management-console",
}


def new_object_metadata(namespace: str, name: str) -> ObjectMeta:
    return ObjectMeta(name=name, namespace=namespace)


def new_service_spec(
    kind: ServiceKind, replicas: int, full_image: str, default_image_name: str
) -> ServiceSpec:
    """Spec for `kind` with the image resolved from configuration.

    Service images may live in insecure registries, so the flag is always on.
    """
    return ServiceSpec(
        replicas=replicas,
        image=new_image_or_default(full_image, default_image_name),
        insecure_image_registry=True,
        persistence=PersistenceProperties() if kind.supports_persistence else None,
        events=EventsProperties() if kind.supports_events else None,
    )


def new_service_status() -> ServiceStatus:
    return ServiceStatus(conditions=[])


def new_service_descriptor(
    kind: ServiceKind,
    namespace: str,
    name: str,
    replicas: int = 1,
    *,
    full_image: str = "",
    enable_persistence: bool = False,
    enable_events: bool = False,
) -> ServiceDescriptor:
    resource = ServiceResource(
        kind=kind.resource_kind,
        metadata=new_object_metadata(namespace, name),
        spec=new_service_spec(kind, replicas, full_image, DEFAULT_IMAGE_NAMES[kind]),
        status=new_service_status(),
    )
    return ServiceDescriptor(
        resource=resource,
        enable_persistence=enable_persistence,
        enable_events=enable_events,
    )
