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


"""Constants, dependency loading, and dep_value helper."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_dependencies() -> dict:
    """Load pinned tool versions from dependencies.yaml.

    Returns:
        Parsed YAML content as a nested dictionary.
    """
    deps_file = Path(__file__).resolve().parent / "dependencies.yaml"
    with open(deps_file) as f:
        return yaml.safe_load(f) or {}


DEPENDENCIES = load_dependencies()


def dep_value(*keys: str, default: Any = None) -> Any:
    """Safely traverse the DEPENDENCIES dict by key path.

    Args:
        *keys: Sequence of dictionary keys to traverse.
        default: Value to return if any key is missing.

    Returns:
        The value at the nested key path, or *default* if not found.
    """
    node = DEPENDENCIES
    for key in keys:
        if not isinstance(node, dict):
            return default
        node = node.get(key)
        if node is None:
            return default
    return node


# -- kind binary --
KIND_BINARY = "kind"
KIND_VERSION_FALLBACK = "v0.17.0"
KIND_PACKAGE_FALLBACK = "sigs.k8s.io/kind"
DEFAULT_KIND_VERSION = dep_value("kind", "version", default=KIND_VERSION_FALLBACK)
KIND_PACKAGE = dep_value("kind", "package", default=KIND_PACKAGE_FALLBACK)

# -- Cluster defaults --
DEFAULT_CLUSTER_NAME = "kind-e2e"
KUBECTL_CONTEXT_PREFIX = "kind-"
KUBECONFIG_FILE_PREFIX = "kind-cluster-"

# -- Control plane readiness --
DEFAULT_WAIT_TIMEOUT_SECONDS = 300
DEFAULT_POLL_INTERVAL_SECONDS = 2.0

LABEL_COMPONENT = "component"
LABEL_K8S_APP = "k8s-app"
CONTROL_PLANE_COMPONENTS = ("etcd", "kube-apiserver", "kube-controller-manager", "kube-scheduler")
CLUSTER_ADDONS = ("kindnet", "kube-dns", "kube-proxy")

# -- Process exit codes --
EXIT_COMMAND_NOT_FOUND = 127
