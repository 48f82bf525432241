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

import pytest
from typer.testing import CliRunner

import kube_rollout.cli.main as main
from kube_rollout.cli.main import app
from kube_rollout.deploy.installer import ServiceInstaller
from kube_rollout.exceptions import CommandError

runner = CliRunner()


@pytest.fixture
def wired(monkeypatch, mocker, fake_cluster_cls):
    """Replace kubectl/CLI collaborators with in-memory fakes."""
    cluster = fake_cluster_cls(observations=[(1, 1)])
    cli_runner = mocker.Mock()
    hook = mocker.Mock()
    monkeypatch.setattr(main, "_cluster", lambda: cluster)
    monkeypatch.setattr(
        main,
        "_installer",
        lambda c: ServiceInstaller(cluster=c, runner=cli_runner, hook=hook),
    )
    return cluster, cli_runner, hook


def test_version_short(monkeypatch):
    monkeypatch.setattr(main, "get_version", lambda: "1.2.3")

    result = runner.invoke(app, ["version", "--short"])

    assert result.exit_code == 0
    assert result.stdout.strip() == "1.2.3"


def test_install_cr_then_wait(wired):
    cluster, cli_runner, hook = wired

    result = runner.invoke(
        app, ["install", "svc", "-n", "ns", "--enable-persistence", "--env", "A=1"]
    )

    assert result.exit_code == 0, result.stdout
    assert "svc installed in ns" in result.stdout
    (manifest,) = cluster.created
    assert manifest["spec"]["env"] == {"A": "1"}
    assert manifest["spec"]["infinispan"]["useKogitoInfra"] is True
    cli_runner.execute.assert_not_called()
    hook.on_service_deployed.assert_called_once()
    assert cluster.get_calls == 1


def test_install_with_explicit_endpoint_keeps_it(wired):
    cluster, _, _ = wired

    result = runner.invoke(
        app,
        ["install", "svc", "-n", "ns", "--enable-events", "--kafka-url", "kafka:9092", "--no-wait"],
    )

    assert result.exit_code == 0, result.stdout
    kafka = cluster.created[0]["spec"]["kafka"]
    assert kafka["externalUri"] == "kafka:9092"
    assert kafka["useKogitoInfra"] is False
    assert cluster.get_calls == 0


def test_install_cli_uses_deployment_name(wired):
    _, cli_runner, _ = wired

    result = runner.invoke(
        app,
        ["install", "svc", "-n", "ns", "-i", "cli", "--deployment-name", "travels", "--no-wait"],
    )

    assert result.exit_code == 0, result.stdout
    namespace, tokens = cli_runner.execute.call_args.args
    assert namespace == "ns"
    assert tokens[:2] == ["install", "travels"]


def test_deploy_cli_uses_service_name(wired):
    _, cli_runner, _ = wired

    result = runner.invoke(app, ["deploy", "svc", "-n", "ns", "-i", "cli", "-r", "1"])

    assert result.exit_code == 0, result.stdout
    _, tokens = cli_runner.execute.call_args.args
    assert tokens[:4] == ["deploy", "svc", "--replicas", "1"]


def test_installation_failure_exits_non_zero(wired):
    _, cli_runner, _ = wired
    cli_runner.execute.side_effect = CommandError(["kogito"], 1, "boom from cli")

    result = runner.invoke(app, ["deploy", "svc", "-n", "ns", "-i", "cli"])

    assert result.exit_code == 1
    assert "boom from cli" in result.stdout


def test_bad_env_is_a_usage_error(wired):
    result = runner.invoke(app, ["install", "svc", "-n", "ns", "--env", "NOVALUE"])

    assert result.exit_code == 2


def test_wait_times_out(monkeypatch, fake_cluster_cls, default_clock):
    cluster = fake_cluster_cls(observations=[(2, 1)])
    monkeypatch.setattr(main, "_cluster", lambda: cluster)
    monkeypatch.setenv("KUBE_ROLLOUT_POLL_INTERVAL_S", "1")
    from kube_rollout.config.settings import reload_settings_cache

    reload_settings_cache()

    result = runner.invoke(app, ["wait", "svc", "-n", "ns", "-r", "2", "--timeout", "3"])

    assert result.exit_code == 1
    assert "Timed out" in result.stdout
    assert default_clock.slept == [1.0, 1.0, 1.0]


def test_wait_reports_why_observation_failed(monkeypatch, fake_cluster_cls, cluster_error):
    monkeypatch.setattr(main, "_cluster", lambda: fake_cluster_cls(observations=[cluster_error]))

    result = runner.invoke(app, ["wait", "svc", "-n", "ns"])

    assert result.exit_code == 1
    assert "Could not observe deployment" in result.stdout
    assert "connection refused" in result.stdout


def test_wait_converged(monkeypatch, fake_cluster_cls):
    monkeypatch.setattr(main, "_cluster", lambda: fake_cluster_cls(observations=[(2, 2)]))

    result = runner.invoke(app, ["wait", "svc", "-n", "ns", "-r", "2"])

    assert result.exit_code == 0
    assert "svc running with 2 replicas" in result.stdout
