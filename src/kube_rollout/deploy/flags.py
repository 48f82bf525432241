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

from kube_rollout.models.service import ServiceDescriptor


def _key_values(flag: str, values: dict[str, str]) -> list[str]:
    out: list[str] = []
    for key in sorted(values):
        out.extend([flag, f"{key}={values[key]}"])
    return out


def service_cli_flags(descriptor: ServiceDescriptor) -> list[str]:
    """
    Map a descriptor onto installer CLI flags.

    The order is fixed so the same descriptor always yields the same command.

    :param descriptor: The service to install.
    :return: Flags to append after the verb and deployment name.
    """
    spec = descriptor.spec
    flags = ["--replicas", str(spec.replicas)]

    if spec.image:
        flags.extend(["--image", spec.image])
    if spec.insecure_image_registry:
        flags.append("--insecure-image-registry")
    flags.extend(["--http-port", str(spec.http_port)])

    if descriptor.enable_persistence and spec.persistence is not None:
        flags.append("--enable-persistence")
        if spec.persistence.uri:
            flags.extend(["--infinispan-url", spec.persistence.uri])

    if descriptor.enable_events and spec.events is not None:
        flags.append("--enable-events")
        if spec.events.external_uri:
            flags.extend(["--kafka-url", spec.events.external_uri])
        if spec.events.instance:
            flags.extend(["--kafka-instance", spec.events.instance])

    flags.extend(_key_values("--env", spec.env))
    flags.extend(_key_values("--label", descriptor.resource.metadata.labels))
    return flags
