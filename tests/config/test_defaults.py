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

from pathlib import Path
from types import SimpleNamespace

import yaml

import kube_rollout.config.defaults as mod
from kube_rollout.config.settings import reload_settings_cache


def _write_yaml(p: Path, data) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(yaml.safe_dump(data, sort_keys=False))


def test_settings_defaults_file_takes_precedence(mocker, tmp_path):
    defaults = tmp_path / "mine.yaml"
    _write_yaml(defaults, {"image": {"tag": "1.0"}})
    _write_yaml(tmp_path / "defaults.yaml", {"image": {"tag": "2.0"}})
    mocker.patch.object(
        mod, "get_settings", return_value=SimpleNamespace(defaults_file=str(defaults))
    )

    assert mod._find_defaults_file() == defaults


def test_cwd_file_wins_over_dot_directory(tmp_path):
    _write_yaml(tmp_path / ".kube_rollout" / "defaults.yaml", {"image": {"tag": "hidden"}})
    assert mod.image_defaults().tag == "hidden"

    _write_yaml(tmp_path / "defaults.yaml", {"image": {"tag": "plain"}})
    mod.reload_defaults_cache()

    assert mod.image_defaults().tag == "plain"


def test_home_defaults_found_through_settings(tmp_path):
    # KUBE_ROLLOUT_HOME points at tmp_path / "home" (see conftest)
    _write_yaml(tmp_path / "home" / "defaults.yaml", {"image": {"namespace": "from-home"}})

    assert mod.image_defaults().namespace == "from-home"


def test_env_var_points_at_defaults(monkeypatch, tmp_path):
    target = tmp_path / "elsewhere.yaml"
    _write_yaml(target, {"image": {"tag": "9.9"}})
    monkeypatch.setenv("KUBE_ROLLOUT_DEFAULTS", str(target))
    reload_settings_cache()

    assert mod.image_defaults().tag == "9.9"


def test_image_section_blank_and_missing_fields_are_unset(tmp_path):
    _write_yaml(tmp_path / "defaults.yaml", {"image": {"registry": "mirror", "tag": " "}})

    d = mod.image_defaults()
    assert d.registry == "mirror"
    assert d.tag is None
    assert d.namespace is None


def test_numeric_tag_is_read_as_text(tmp_path):
    (tmp_path / "defaults.yaml").write_text("image:\n  tag: 1.5\n")

    assert mod.image_defaults().tag == "1.5"


def test_no_file_means_no_defaults():
    assert mod.image_defaults() == mod.ImageDefaults()


def test_non_mapping_file_is_ignored(tmp_path):
    (tmp_path / "defaults.yaml").write_text("- just\n- a list\n")

    assert mod.image_defaults() == mod.ImageDefaults()


def test_non_mapping_image_section_is_ignored(tmp_path):
    _write_yaml(tmp_path / "defaults.yaml", {"image": "quay.io/x"})

    assert mod.image_defaults() == mod.ImageDefaults()


def test_unrelated_sections_are_ignored(tmp_path):
    _write_yaml(tmp_path / "defaults.yaml", {"other": {"registry": "nope"}})

    assert mod.image_defaults().registry is None
