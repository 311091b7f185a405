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


"""Configuration classes and cluster options."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kind_manager.constants import (
    DEFAULT_CLUSTER_NAME,
    DEFAULT_KIND_VERSION,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    KIND_BINARY,
)


# ============================================================================
# Configuration classes
# ============================================================================

class KindConfig(BaseSettings):
    """kind cluster configuration, auto-loaded from KIND_* env vars.

    Attributes:
        cluster_name: Name of the kind cluster.
        kind_path: Path or name of the kind executable.
        kind_version: kind release to install when the binary is missing.
        node_image: Node image override passed as ``--image``, or None.
        config_file: kind cluster config file passed as ``--config``, or None.
        kubeconfig: Fixed kubeconfig location, or None for a new temp file.
        wait_timeout: Seconds to wait for each control plane workload group.
        poll_interval: Seconds between readiness polls.
    """

    model_config = SettingsConfigDict(env_prefix="KIND_", extra="ignore")

    cluster_name: str = Field(default=DEFAULT_CLUSTER_NAME, min_length=1, pattern=r"^[^\n]+$")
    kind_path: str = KIND_BINARY
    kind_version: str = Field(default=DEFAULT_KIND_VERSION, pattern=r"^v\d+\.\d+\.\d+([-+][\w.]+)?$")
    node_image: str | None = None
    config_file: str | None = None
    kubeconfig: str | None = None
    wait_timeout: int = Field(default=DEFAULT_WAIT_TIMEOUT_SECONDS, ge=1)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, gt=0)


# ============================================================================
# Cluster options
# ============================================================================

class OptionKind(Enum):
    """Settings a ClusterOption may carry."""

    IMAGE = "image"
    PATH = "path"
    VERSION = "version"


@dataclass(frozen=True)
class ClusterOption:
    """A single typed setting applied to a cluster handle before creation.

    Attributes:
        kind: Which handle setting the option targets.
        value: The new value for that setting.
    """

    kind: OptionKind
    value: str


def with_image(image: str) -> ClusterOption:
    """Option that sets the node image passed to ``kind create cluster --image``."""
    return ClusterOption(OptionKind.IMAGE, image)


def with_path(path: str) -> ClusterOption:
    """Option that sets the kind executable path."""
    return ClusterOption(OptionKind.PATH, path)


def with_version(version: str) -> ClusterOption:
    """Option that pins the kind release installed when the binary is missing."""
    return ClusterOption(OptionKind.VERSION, version)


def resolve_config(**overrides: object) -> KindConfig:
    """Load KindConfig from the environment and apply non-None CLI overrides.

    Args:
        **overrides: KindConfig field values; None means "not given".

    Returns:
        The resolved configuration.
    """
    cfg = KindConfig()
    updates = {key: value for key, value in overrides.items() if value is not None}
    if updates:
        cfg = KindConfig.model_validate({**cfg.model_dump(), **updates})
    return cfg
