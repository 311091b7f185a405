# /*
# Copyright 2026 The Grove Authors.
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
# */


"""Cluster subcommands (create, delete, export-logs)."""

from __future__ import annotations

import threading

import typer
from rich.panel import Panel

from kind_manager import console
from kind_manager.cluster import Cluster
from kind_manager.config import KindConfig, resolve_config
from kind_manager.kubeconfig import default_kubeconfig_path

app = typer.Typer(help="Manage the kind cluster lifecycle.")


def _cluster(cfg: KindConfig) -> Cluster:
    """Build a handle whose kubeconfig lives at a fixed path across invocations."""
    return Cluster.from_config(cfg).with_kubeconfig_path(cfg.kubeconfig or default_kubeconfig_path(cfg.cluster_name))


@app.command()
def create(
    cluster_name: str | None = typer.Option(None, "--name", help="kind cluster name"),
    config_file: str | None = typer.Option(None, "--config", help="kind cluster config file"),
    image: str | None = typer.Option(None, "--image", help="Node image"),
    kind_path: str | None = typer.Option(None, "--path", help="kind executable"),
    kind_version: str | None = typer.Option(None, "--version", help="kind release to install if missing"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait for control plane pods"),
    timeout: int | None = typer.Option(None, "--timeout", help="Seconds to wait per pod group"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="Where to write the kubeconfig"),
) -> None:
    """Create a kind cluster (no-op if it exists) and print its kubeconfig path."""
    cfg = resolve_config(
        cluster_name=cluster_name,
        config_file=config_file,
        node_image=image,
        kind_path=kind_path,
        kind_version=kind_version,
        wait_timeout=timeout,
        kubeconfig=kubeconfig,
    )
    cluster = _cluster(cfg)

    console.print(Panel.fit(f"Creating kind cluster '{cfg.cluster_name}'", style="bold blue"))
    kubeconfig_file = cluster.create_with_config(cfg.config_file or "")
    console.print(f"[green]✅ Cluster '{cfg.cluster_name}' ready (context {cluster.get_context_name()})[/green]")

    if wait:
        console.print("[yellow]ℹ️  Waiting for control plane pods...[/yellow]")
        cluster.wait_for_control_plane(
            cancel=threading.Event(), timeout=cfg.wait_timeout, poll_interval=cfg.poll_interval
        )
        console.print("[green]✅ Control plane is ready[/green]")

    typer.echo(kubeconfig_file)


@app.command()
def delete(
    cluster_name: str | None = typer.Option(None, "--name", help="kind cluster name"),
    kind_path: str | None = typer.Option(None, "--path", help="kind executable"),
    kubeconfig: str | None = typer.Option(None, "--kubeconfig", help="kubeconfig written by create"),
) -> None:
    """Delete the kind cluster and its kubeconfig."""
    cfg = resolve_config(cluster_name=cluster_name, kind_path=kind_path, kubeconfig=kubeconfig)
    console.print(f"[yellow]ℹ️  Deleting kind cluster '{cfg.cluster_name}'...[/yellow]")
    _cluster(cfg).destroy()
    console.print(f"[green]✅ Cluster '{cfg.cluster_name}' deleted[/green]")


@app.command("export-logs")
def export_logs(
    dest: str = typer.Argument(..., help="Directory to export logs into"),
    cluster_name: str | None = typer.Option(None, "--name", help="kind cluster name"),
    kind_path: str | None = typer.Option(None, "--path", help="kind executable"),
) -> None:
    """Export all cluster logs to DEST."""
    cfg = resolve_config(cluster_name=cluster_name, kind_path=kind_path)
    Cluster.from_config(cfg).export_logs(dest)
    console.print(f"[green]✅ Logs for '{cfg.cluster_name}' exported to {dest}[/green]")
