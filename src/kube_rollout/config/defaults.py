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
from typing import Any

from pydantic import BaseModel, field_validator
import yaml

from kube_rollout.config.settings import get_settings
from kube_rollout.helpers.logger import setup_logger

logger = setup_logger(__name__)

# Checked after the settings path (which already covers $KUBE_ROLLOUT_DEFAULTS
# and ~/.kube_rollout/defaults.yaml). First hit wins.
_LOCAL_DEFAULT_FILES = (
    Path("defaults.yaml"),
    Path(".kube_rollout") / "defaults.yaml",
)


class ImageDefaults(BaseModel):
    """The `image:` section of a defaults file. Unset or blank fields are None."""

    registry: str | None = None
    namespace: str | None = None
    tag: str | None = None

    @field_validator("registry", "namespace", "tag", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        if v is None:
            return None
        v = str(v).strip()
        return v or None


def _find_defaults_file() -> Path | None:
    s = get_settings()
    if s.defaults_file and Path(s.defaults_file).is_file():
        return Path(s.defaults_file)

    cwd = Path.cwd()
    for rel in _LOCAL_DEFAULT_FILES:
        p = cwd / rel
        if p.is_file():
            logger.debug(f"Using defaults file: {p}")
            return p
    return None


@lru_cache(maxsize=1)
def image_defaults() -> ImageDefaults:
    """Image defaults from the first defaults file found, or all-None when there is none."""
    p = _find_defaults_file()
    if not p:
        return ImageDefaults()
    data = yaml.safe_load(p.read_text()) or {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring defaults file {p}: top level is not a mapping")
        return ImageDefaults()
    section = data.get("image")
    if section is None:
        return ImageDefaults()
    if not isinstance(section, dict):
        logger.warning(f"Ignoring defaults file {p}: 'image' is not a mapping")
        return ImageDefaults()
    return ImageDefaults.model_validate(section)


def reload_defaults_cache() -> None:
    """If you change defaults.yaml at runtime/tests, clear cache."""
    image_defaults.cache_clear()
