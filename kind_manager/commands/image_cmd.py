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


"""Image subcommands (load, load-archive)."""

from __future__ import annotations

import typer

from kind_manager import console
from kind_manager.cluster import Cluster
from kind_manager.config import resolve_config

app = typer.Typer(help="Load images into the kind cluster.")


@app.command()
def load(
    images: list[str] = typer.Argument(..., help="Local docker images to load"),
    cluster_name: str | None = typer.Option(None, "--name", help="kind cluster name"),
    kind_path: str | None = typer.Option(None, "--path", help="kind executable"),
) -> None:
    """Load one or more local docker images into the cluster nodes."""
    cluster = Cluster.from_config(resolve_config(cluster_name=cluster_name, kind_path=kind_path))
    for image in images:
        cluster.load_image(image)
        console.print(f"[green]✓ {image}[/green]")


@app.command("load-archive")
def load_archive(
    archive: str = typer.Argument(..., help="Image tarball to load"),
    cluster_name: str | None = typer.Option(None, "--name", help="kind cluster name"),
    kind_path: str | None = typer.Option(None, "--path", help="kind executable"),
) -> None:
    """Load an image archive into the cluster nodes."""
    cluster = Cluster.from_config(resolve_config(cluster_name=cluster_name, kind_path=kind_path))
    cluster.load_image_archive(archive)
    console.print(f"[green]✓ {archive}[/green]")
