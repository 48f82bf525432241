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

"""Bind services to the shared, operator-managed infrastructure.

When a scenario enables persistence or events but does not point the service
at an explicit endpoint, the service is told to use the infrastructure the
operator provisions in the namespace instead.
"""

from kube_rollout.models.service import ServiceDescriptor


def enable_shared_persistence_if_uri_missing(descriptor: ServiceDescriptor) -> None:
    persistence = descriptor.spec.persistence
    if persistence is None or not descriptor.enable_persistence:
        return
    if not persistence.uri:
        persistence.use_shared_infra = True


def enable_shared_events_if_uri_missing(descriptor: ServiceDescriptor) -> None:
    events = descriptor.spec.events
    if events is None or not descriptor.enable_events:
        return
    if not events.external_uri and not events.instance:
        events.use_shared_infra = True


def apply_shared_infra_rules(descriptor: ServiceDescriptor) -> None:
    enable_shared_persistence_if_uri_missing(descriptor)
    enable_shared_events_if_uri_missing(descriptor)
