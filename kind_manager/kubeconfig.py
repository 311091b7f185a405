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


"""Extract kind kubeconfigs to disk and load them as client configurations."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import yaml
from kubernetes import client, config
from kubernetes.config.config_exception import ConfigException

from kind_manager import logger
from kind_manager.constants import KUBECONFIG_FILE_PREFIX
from kind_manager.errors import CredentialExtractionError, InvocationError
from kind_manager.runner import run_command


def default_kubeconfig_path(cluster_name: str) -> str:
    """Fixed kubeconfig location for *cluster_name* in the system temp dir."""
    return os.path.join(tempfile.gettempdir(), f"{KUBECONFIG_FILE_PREFIX}{cluster_name}-kubecfg")


def _write_kubeconfig(data: bytes, dest: str | None, cluster_name: str) -> str:
    """Write *data* to a new temp file named after the cluster.

    With *dest*, the temp file is created next to it and renamed over it, so
    an existing kubeconfig is never left truncated.
    """
    directory = os.path.dirname(os.path.abspath(dest)) if dest else None
    try:
        tmp = tempfile.NamedTemporaryFile(
            delete=False, dir=directory, prefix=f"{KUBECONFIG_FILE_PREFIX}{cluster_name}-kubecfg-"
        )
    except OSError as err:
        raise CredentialExtractionError(f"kind kubeconfig file {dest or ''}: {err}") from err

    written = 0
    try:
        with tmp:
            written = tmp.write(data)
        if written != len(data):
            raise CredentialExtractionError(
                f"kind kubeconfig file {tmp.name}: bytes written: {written} of {len(data)}"
            )
        if dest:
            os.replace(tmp.name, dest)
    except OSError as err:
        Path(tmp.name).unlink(missing_ok=True)
        raise CredentialExtractionError(f"kind kubeconfig file {dest or tmp.name}: bytes written: {written}: {err}") from err
    except CredentialExtractionError:
        Path(tmp.name).unlink(missing_ok=True)
        raise
    return dest or tmp.name


def extract_kubeconfig(kind_path: str, cluster_name: str, dest: str | None = None) -> str:
    """Fetch the kubeconfig of a kind cluster and persist it.

    Args:
        kind_path: Path of the kind executable.
        cluster_name: Name of the kind cluster.
        dest: File to create or atomically replace, or None to create a new temp file.

    Returns:
        Path of the written kubeconfig.

    Raises:
        InvocationError: If ``kind get kubeconfig`` fails.
        CredentialExtractionError: If the output is empty or cannot be written.
    """
    result = run_command(kind_path, "get", "kubeconfig", "--name", cluster_name)
    if not result.ok:
        raise InvocationError("get kubeconfig", cluster_name, result.exit_code, result.output)
    if not result.stdout:
        raise CredentialExtractionError(f"kind get kubeconfig for cluster '{cluster_name}': bytes copied: 0")

    path = _write_kubeconfig(result.stdout, dest, cluster_name)
    logger.debug("Wrote kubeconfig for cluster %s to %s (%d bytes)", cluster_name, path, len(result.stdout))
    return path


def load_rest_config(path: str) -> client.Configuration:
    """Parse a kubeconfig file into a kubernetes client configuration.

    Raises:
        CredentialExtractionError: If the file is unreadable or not a valid kubeconfig.
    """
    cfg = client.Configuration()
    try:
        config.load_kube_config(config_file=path, client_configuration=cfg)
    except (ConfigException, OSError, yaml.YAMLError) as err:
        raise CredentialExtractionError(f"load kubeconfig {path}: {err}") from err
    return cfg
