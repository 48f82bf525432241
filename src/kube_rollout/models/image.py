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

from pydantic import BaseModel

from kube_rollout.config.defaults import image_defaults
from kube_rollout.config.settings import get_settings
from kube_rollout.utils.version import get_version

DEFAULT_IMAGE_REGISTRY = "quay.io"
DEFAULT_IMAGE_NAMESPACE = "kiegroup"


class Image(BaseModel):
    domain: str = ""
    namespace: str = ""
    name: str = ""
    tag: str = ""

    def to_tag(self) -> str:
        """Render as `domain/namespace/name:tag`, skipping empty parts."""
        if not self.name:
            return ""
        parts = [p for p in (self.domain, self.namespace, self.name) if p]
        image = "/".join(parts)
        if self.tag:
            image += f":{self.tag}"
        return image


def default_image_tag() -> str:
    """Major.minor of the installed package, e.g. 0.3.1 -> 0.3."""
    return ".".join(get_version().split(".")[:2])


def is_runtime_image_information_set() -> bool:
    s = get_settings()
    return any(
        (
            s.services_image_registry,
            s.services_image_namespace,
            s.services_image_name_suffix,
            s.services_image_version,
        )
    )


def new_image_or_default(full_image: str, default_image_name: str) -> str:
    """Return `full_image` if given, otherwise build one from configuration.

    Returns an empty string when no image override is configured at all, which
    leaves the choice of image to the operator.
    """
    if full_image:
        return full_image

    image = Image()
    if is_runtime_image_information_set():
        s = get_settings()
        d = image_defaults()
        image.domain = s.services_image_registry or d.registry or DEFAULT_IMAGE_REGISTRY
        image.namespace = s.services_image_namespace or d.namespace or DEFAULT_IMAGE_NAMESPACE
        image.name = default_image_name
        image.tag = s.services_image_version or d.tag or default_image_tag()

        if s.services_image_name_suffix:
            image.name = f"{image.name}-{s.services_image_name_suffix}"
    return image.to_tag()
