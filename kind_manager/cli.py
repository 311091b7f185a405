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


"""
cli.py - CLI for ephemeral kind clusters used in e2e testing.

Subcommands:
    cluster    Cluster lifecycle (create, delete, export-logs)
    image      Image loading (load, load-archive)

Environment Variables:
    Settings can be overridden via KIND_* environment variables:
    - KIND_CLUSTER_NAME (default: kind-e2e)
    - KIND_KIND_PATH (default: kind)
    - KIND_KIND_VERSION (default: from dependencies.yaml)
    - KIND_NODE_IMAGE, KIND_CONFIG_FILE, KIND_WAIT_TIMEOUT, KIND_POLL_INTERVAL

Examples:
    # Create a cluster and wait for the control plane
    kind-manager cluster create --name e2e --config kind.yaml

    # Load a locally built image
    kind-manager image load my-operator:dev --name e2e

    # Collect logs and tear down
    kind-manager cluster export-logs ./artifacts --name e2e
    kind-manager cluster delete --name e2e
"""

from __future__ import annotations

import logging
import sys

import typer

from kind_manager import console
from kind_manager.commands import cluster_cmd, image_cmd

app = typer.Typer(
    help="Manage ephemeral kind clusters for e2e testing.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Initialize logging for all subcommands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


app.add_typer(cluster_cmd.app, name="cluster")
app.add_typer(image_cmd.app, name="image")


def main() -> None:
    try:
        app()
    except Exception as e:
        console.print(f"[red]❌ {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
