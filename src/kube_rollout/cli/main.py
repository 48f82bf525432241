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

from typing import Optional

from rich.console import Console
from rich.markup import escape
import typer
from typing_extensions import Annotated

from ..config.settings import get_settings
from ..deploy.exposure import IngressExposer, PostDeployHook
from ..deploy.installer import ServiceInstaller
from ..deploy.readiness import ReadinessWaiter
from ..exceptions import KubeRolloutError
from ..helpers.logger import setup_logger
from ..models.builders import new_service_descriptor
from ..models.service import ServiceDescriptor, ServiceKind
from ..platform.command import SubprocessCommandRunner
from ..platform.kubectl import KubectlClusterClient, KubectlPlatformDetector
from ..platform.protocols import ClusterClient, InstallerKind
from ..utils.version import get_version

app = typer.Typer(name="kube-rollout CLI", no_args_is_help=True)

console = Console()
logger = setup_logger("kube_rollout.cli", console=console)


def _cluster() -> ClusterClient:
    return KubectlClusterClient()


def _installer(cluster: ClusterClient) -> ServiceInstaller:
    hook = PostDeployHook(platform=KubectlPlatformDetector(), exposer=IngressExposer(cluster))
    return ServiceInstaller(cluster=cluster, runner=SubprocessCommandRunner(), hook=hook)


def _parse_env(values: list[str]) -> dict[str, str]:
    env = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got {item!r}", param_hint="--env")
        env[key] = value
    return env


def _wait(
    cluster: ClusterClient, namespace: str, name: str, replicas: int, timeout: Optional[float]
):
    if timeout is None:
        timeout = get_settings().wait_timeout_s
    with console.status(f"[bold green]Waiting for {name} to run {replicas} replicas...") as status:

        def _tick(observed):
            if observed is None:
                status.update(f"[yellow]Deployment {name} not found yet…")
            else:
                status.update(
                    f"[yellow]{name}: replicas={observed.replicas}, "
                    f"available={observed.available_replicas}/{replicas}…"
                )

        result = ReadinessWaiter(cluster, on_tick=_tick).poll(namespace, name, replicas, timeout)
    result.raise_for_outcome()
    return result


NamespaceOpt = Annotated[str, typer.Option("--namespace", "-n", help="Target namespace")]
ReplicasOpt = Annotated[int, typer.Option("--replicas", "-r", min=0, help="Desired replicas")]
TimeoutOpt = Annotated[
    Optional[float],
    typer.Option("--timeout", help="Seconds to wait for the service to converge"),
]


def _run_install(
    name: str,
    verb: str,
    deployment_name: str,
    namespace: str,
    kind: ServiceKind,
    installer: InstallerKind,
    replicas: int,
    image: str,
    enable_persistence: bool,
    persistence_uri: str,
    enable_events: bool,
    kafka_url: str,
    kafka_instance: str,
    env: list[str],
    wait: bool,
    timeout: Optional[float],
) -> None:
    descriptor: ServiceDescriptor = new_service_descriptor(
        kind,
        namespace,
        name,
        replicas,
        full_image=image,
        enable_persistence=enable_persistence,
        enable_events=enable_events,
    )
    descriptor.spec.env.update(_parse_env(env))
    if descriptor.spec.persistence is not None:
        descriptor.spec.persistence.uri = persistence_uri
    if descriptor.spec.events is not None:
        descriptor.spec.events.external_uri = kafka_url
        descriptor.spec.events.instance = kafka_instance
    logger.debug(f"Resource to submit: {escape(str(descriptor.resource.to_manifest()))}")

    cluster = _cluster()
    try:
        if verb == "install":
            _installer(cluster).install(descriptor, installer, deployment_name or name)
        else:
            _installer(cluster).deploy(descriptor, installer)
        if wait:
            _wait(cluster, namespace, name, replicas, timeout)
    except KubeRolloutError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    typer.echo(f"✅ {name} {verb}ed in {namespace}")


def _install_command(verb: str):
    def command(
        name: Annotated[str, typer.Argument(help="Service name")],
        namespace: NamespaceOpt,
        kind: Annotated[
            ServiceKind, typer.Option("--kind", "-k", help="Kind of service")
        ] = ServiceKind.RUNTIME,
        installer: Annotated[
            InstallerKind,
            typer.Option("--installer", "-i", help="cr: submit the resource; cli: run the CLI"),
        ] = InstallerKind.CR,
        replicas: ReplicasOpt = 1,
        image: Annotated[str, typer.Option("--image", help="Full image tag")] = "",
        enable_persistence: Annotated[bool, typer.Option("--enable-persistence")] = False,
        persistence_uri: Annotated[
            str, typer.Option("--infinispan-url", help="Explicit Infinispan URI")
        ] = "",
        enable_events: Annotated[bool, typer.Option("--enable-events")] = False,
        kafka_url: Annotated[str, typer.Option("--kafka-url", help="External Kafka URI")] = "",
        kafka_instance: Annotated[
            str, typer.Option("--kafka-instance", help="Kafka instance in the namespace")
        ] = "",
        env: Annotated[
            Optional[list[str]], typer.Option("--env", "-e", help="KEY=VALUE, repeatable")
        ] = None,
        deployment_name: Annotated[
            str, typer.Option("--deployment-name", help="CLI deployment name (install only)")
        ] = "",
        wait: Annotated[bool, typer.Option("--wait/--no-wait")] = True,
        timeout: TimeoutOpt = None,
    ) -> None:
        _run_install(
            name,
            verb,
            deployment_name,
            namespace,
            kind,
            installer,
            replicas,
            image,
            enable_persistence,
            persistence_uri,
            enable_events,
            kafka_url,
            kafka_instance,
            env or [],
            wait,
            timeout,
        )

    return command


app.command("install", short_help="Install a service")(_install_command("install"))
app.command("deploy", short_help="Deploy a service under its own name")(
    _install_command("deploy")
)


@app.command("wait", short_help="Wait for a service to reach its replica count")
def wait_command(
    name: Annotated[str, typer.Argument(help="Service name")],
    namespace: NamespaceOpt,
    replicas: ReplicasOpt = 1,
    timeout: TimeoutOpt = None,
) -> None:
    try:
        _wait(_cluster(), namespace, name, replicas, timeout)
    except KubeRolloutError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    typer.echo(f"✅ {name} running with {replicas} replicas")


@app.command("version", short_help="Show the version of the kube-rollout CLI")
def version(short: bool = False):
    v = get_version()
    print(v if short else f"kube-rollout CLI Version: {v}")
    raise typer.Exit()


if __name__ == "__main__":
    app()
