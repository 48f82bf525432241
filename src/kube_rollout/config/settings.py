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

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized environment configuration for kube-rollout.

    Env var naming: KUBE_ROLLOUT_<FIELD_NAME>.
    A .env file in CWD or ~/.kube_rollout/.env is read automatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="KUBE_ROLLOUT_",
        env_file=(".env", "~/.kube_rollout/.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # --- General -------------------------------------------------------------
    log_level: str = "INFO"
    home: Path = Field(
        default=Path("~/.kube_rollout").expanduser(),
        description="Path to kube-rollout home directory",
    )
    defaults_file: Path | None = Field(
        default_factory=lambda data: data["home"] / "defaults.yaml",
        alias="KUBE_ROLLOUT_DEFAULTS",
        description="Path to YAML with overridable defaults",
    )

    # --- Service images ------------------------------------------------------
    services_image_registry: str = Field(
        default="",
        description="Registry used to build service images, e.g. quay.io",
    )
    services_image_namespace: str = Field(
        default="",
        description="Registry namespace (organization) of the service images",
    )
    services_image_version: str = Field(
        default="",
        description="Tag of the service images",
    )
    services_image_name_suffix: str = Field(
        default="",
        description="Suffix appended to the service image names, e.g. 'nightly'",
    )

    # --- Cluster / CLI -------------------------------------------------------
    kubectl_path: str = Field(default="kubectl", description="kubectl executable")
    cli_path: str = Field(
        default="kogito",
        description="Executable used by the imperative (cli) installer",
    )
    cli_namespace_flag: str = Field(
        default="--project",
        description="Flag the installer CLI uses to select the target namespace",
    )

    # --- Readiness -----------------------------------------------------------
    poll_interval_s: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between two deployment observations while waiting",
    )
    wait_timeout_s: float = Field(
        default=600.0,
        gt=0,
        description="Default time budget for a service to converge",
    )

    # --- Exposure ------------------------------------------------------------
    local_cluster: bool = Field(
        default=False,
        description="If true, ingress hosts are the bare service name",
    )
    domain_suffix: str = Field(
        default="example.com",
        description="DNS suffix used for ingress hosts on non-local clusters",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor. Call this wherever you need settings.
    Tests can `cache_clear()` before reading to pick up monkeypatched env.
    """
    return Settings()


def reload_settings_cache() -> None:
    get_settings.cache_clear()  # type: ignore[attr-defined]
