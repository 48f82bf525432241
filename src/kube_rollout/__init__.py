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

from importlib.metadata import PackageNotFoundError, version
from typing import TYPE_CHECKING

try:
    __version__ = version("kube-rollout")
except PackageNotFoundError:  # during dev
    __version__ = "0.0.0"

__all__ = [
    "InstallerKind",
    "ServiceDescriptor",
    "ServiceInstaller",
    "new_service_descriptor",
    "wait_for_service",
]


def __getattr__(name: str):
    if name == "InstallerKind":
        from .platform.protocols import InstallerKind

        return InstallerKind
    if name == "ServiceDescriptor":
        from .models.service import ServiceDescriptor

        return ServiceDescriptor
    if name == "ServiceInstaller":
        from .deploy.installer import ServiceInstaller

        return ServiceInstaller
    if name == "new_service_descriptor":
        from .models.builders import new_service_descriptor

        return new_service_descriptor
    if name == "wait_for_service":
        from .deploy.readiness import wait_for_service

        return wait_for_service
    raise AttributeError(name)


if TYPE_CHECKING:
    from .deploy.installer import ServiceInstaller
    from .deploy.readiness import wait_for_service
    from .models.builders import new_service_descriptor
    from .models.service import ServiceDescriptor
    from .platform.protocols import InstallerKind
