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


"""kind cluster lifecycle: create, destroy, image loading, and log export."""

from __future__ import annotations

import threading
from pathlib import Path

from kubernetes.client import ApiClient, Configuration

from kind_manager import logger
from kind_manager.config import ClusterOption, KindConfig, OptionKind
from kind_manager.constants import DEFAULT_KIND_VERSION, KIND_BINARY, KIND_PACKAGE, KUBECTL_CONTEXT_PREFIX
from kind_manager.errors import (
    CancellationError,
    ConsistencyError,
    InvocationError,
    KindError,
    TeardownError,
)
from kind_manager.installer import find_or_install
from kind_manager.kubeconfig import extract_kubeconfig, load_rest_config
from kind_manager.readiness import wait_for_control_plane
from kind_manager.runner import run_command

_OPTION_FIELDS = {
    OptionKind.IMAGE: "image",
    OptionKind.PATH: "path",
    OptionKind.VERSION: "version",
}


def _check_cancelled(cancel: threading.Event | None, operation: str, name: str) -> None:
    if cancel is not None and cancel.is_set():
        raise CancellationError(f"kind: {operation} for cluster '{name}' cancelled")


class Cluster:
    """A single kind cluster owned by one caller.

    Attributes:
        name: kind cluster name.
        path: kind executable; rewritten once the binary is resolved.
        version: kind release installed when the binary is missing.
        image: Node image passed as ``--image`` by create_with_config.
        kubeconfig_file: Most recently extracted kubeconfig, or "".
        kubeconfig_path: Fixed location for the kubeconfig, or "" for a new temp file.
        rest_config: Client configuration parsed from kubeconfig_file, or None.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.path = ""
        self.version = ""
        self.image = ""
        self.kubeconfig_file = ""
        self.kubeconfig_path = ""
        self.rest_config: Configuration | None = None
        self._resolved = False
        self._created = False

    @classmethod
    def from_config(cls, cfg: KindConfig) -> Cluster:
        """Build a handle from settings."""
        cluster = cls(cfg.cluster_name).with_path(cfg.kind_path).with_version(cfg.kind_version)
        if cfg.node_image:
            cluster.image = cfg.node_image
        if cfg.kubeconfig:
            cluster.kubeconfig_path = cfg.kubeconfig
        return cluster

    def __repr__(self) -> str:
        return f"Cluster(name={self.name!r}, path={self.path!r}, kubeconfig={self.kubeconfig_file!r})"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def set_defaults(self) -> Cluster:
        if not self.path:
            self.path = KIND_BINARY
        return self

    def with_name(self, name: str) -> Cluster:
        if self._created and name != self.name:
            raise KindError(f"kind: cannot rename cluster '{self.name}' to '{name}' after creation")
        self.name = name
        return self

    def with_path(self, path: str) -> Cluster:
        self.path = path
        self._resolved = False
        return self

    def with_version(self, version: str) -> Cluster:
        self.version = version
        return self

    def with_kubeconfig_path(self, path: str) -> Cluster:
        self.kubeconfig_path = path
        return self

    def with_opts(self, *opts: ClusterOption) -> Cluster:
        for opt in opts:
            setattr(self, _OPTION_FIELDS[opt.kind], opt.value)
            if opt.kind is OptionKind.PATH:
                self._resolved = False
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_kubeconfig(self) -> str:
        return self.kubeconfig_file

    def get_client_config(self) -> Configuration | None:
        return self.rest_config

    kubernetes_rest_config = get_client_config

    def get_context_name(self) -> str:
        return f"{KUBECTL_CONTEXT_PREFIX}{self.name}"

    def api_client(self) -> ApiClient:
        """Return a new kubernetes ApiClient for the cluster; the caller closes it.

        Raises:
            KindError: If credentials have not been extracted yet.
        """
        if self.rest_config is None:
            raise KindError(f"kind: cluster '{self.name}' has no client configuration, create it first")
        return ApiClient(self.rest_config)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_name(self, operation: str) -> None:
        if not self.name:
            raise KindError(f"kind: {operation} requires a cluster name")

    def _find_or_install_kind(self) -> None:
        path = find_or_install(self.path, KIND_BINARY, KIND_PACKAGE, self.version or DEFAULT_KIND_VERSION)
        if path:
            self.path = path
        self._resolved = True

    def cluster_exists(self, name: str) -> tuple[str, bool]:
        """Check whether kind knows a cluster called *name*.

        Only an exact line of ``kind get clusters`` output counts.

        Returns:
            Tuple of (raw listing, exists).
        """
        result = run_command(self.path, "get", "clusters")
        if not result.ok:
            raise InvocationError("get clusters", name, result.exit_code, result.output)
        clusters = result.stdout.decode(errors="replace")
        return clusters, name in clusters.split("\n")

    def _refresh_credentials(self) -> str:
        if self.kubeconfig_file and Path(self.kubeconfig_file).is_file():
            dest = self.kubeconfig_file
        else:
            dest = self.kubeconfig_path or None
        path = extract_kubeconfig(self.path, self.name, dest)
        self.kubeconfig_file = path
        self.rest_config = load_rest_config(path)
        return path

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_with_config(self, config_file: str = "", cancel: threading.Event | None = None) -> str:
        """Create the cluster from a kind config file and the handle's image override."""
        args: list[str] = []
        if config_file:
            args.extend(["--config", config_file])
        if self.image:
            args.extend(["--image", self.image])
        return self.create(*args, cancel=cancel)

    def create(self, *args: str, cancel: threading.Event | None = None) -> str:
        """Create the cluster unless it already exists, then extract its kubeconfig.

        Args:
            *args: Extra ``kind create cluster`` arguments.
            cancel: Event checked before provisioning and before credential extraction.

        Returns:
            Path of the kubeconfig file.

        Raises:
            ToolResolutionError: If kind cannot be found or installed.
            InvocationError: If ``kind create cluster`` fails.
            ConsistencyError: If the cluster is missing after a successful create.
            CredentialExtractionError: If the kubeconfig cannot be captured.
            CancellationError: If *cancel* is set at a check point.
        """
        self._require_name("create cluster")
        logger.info("Creating kind cluster %s", self.name)
        _check_cancelled(cancel, "create cluster", self.name)
        self._find_or_install_kind()
        self._created = True

        if self.cluster_exists(self.name)[1]:
            logger.info("Skipping create: kind cluster %s already exists", self.name)
            return self._refresh_credentials()

        _check_cancelled(cancel, "create cluster", self.name)
        result = run_command(self.path, "create", "cluster", "--name", self.name, *args)
        if not result.ok:
            raise InvocationError("create cluster", self.name, result.exit_code, result.output)

        clusters, ok = self.cluster_exists(self.name)
        if not ok:
            raise ConsistencyError(
                f"kind: cluster '{self.name}' still not in 'kind get clusters' after creation: {clusters!r}"
            )
        logger.debug("kind clusters available: %s", clusters.strip())

        _check_cancelled(cancel, "get kubeconfig", self.name)
        return self._refresh_credentials()

    def destroy(self) -> None:
        """Delete the cluster and remove its kubeconfig file.

        Raises:
            ToolResolutionError: If kind cannot be found or installed.
            TeardownError: If deletion or kubeconfig removal fails.
        """
        self._require_name("delete cluster")
        logger.info("Destroying kind cluster %s", self.name)
        self._find_or_install_kind()

        result = run_command(self.path, "delete", "cluster", "--name", self.name)
        if not result.ok:
            raise TeardownError(
                f"kind: delete cluster '{self.name}' failed: exit status {result.exit_code}: {result.output.strip()}"
            )

        kubeconfig = self.kubeconfig_file or self.kubeconfig_path
        if kubeconfig:
            logger.debug("Removing kubeconfig file %s", kubeconfig)
            try:
                Path(kubeconfig).unlink(missing_ok=True)
            except OSError as err:
                raise TeardownError(f"kind: remove kubeconfig {kubeconfig} failed: {err}") from err
        self.rest_config = None
        self._created = False

    def load_image(self, image: str) -> None:
        """Load a local docker image into the cluster nodes."""
        self._load("docker-image", image)

    def load_image_archive(self, archive: str) -> None:
        """Load an image tarball into the cluster nodes."""
        self._load("image-archive", archive)

    def _load(self, source: str, ref: str) -> None:
        self._require_name(f"load {source}")
        if not self._resolved:
            self._find_or_install_kind()
        logger.info("Loading %s %s into kind cluster %s", source, ref, self.name)
        result = run_command(self.path, "load", source, "--name", self.name, ref)
        if not result.ok:
            raise InvocationError(f"load {source} {ref}", self.name, result.exit_code, result.output)

    def export_logs(self, dest: str) -> None:
        """Export all cluster logs to *dest*."""
        self._require_name("export logs")
        logger.info("Exporting kind cluster %s logs to %s", self.name, dest)
        self._find_or_install_kind()
        result = run_command(self.path, "export", "logs", dest, "--name", self.name)
        if not result.ok:
            raise InvocationError("export logs", self.name, result.exit_code, result.output)

    def wait_for_control_plane(
        self,
        api_client: ApiClient | None = None,
        cancel: threading.Event | None = None,
        timeout: float | None = None,
        poll_interval: float | None = None,
    ) -> None:
        """Block until the control plane and cluster add-on pods are running.

        Uses the handle's own credentials when *api_client* is not given.
        """
        _check_cancelled(cancel, "wait for control plane", self.name)
        kwargs: dict = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        if poll_interval is not None:
            kwargs["poll_interval"] = poll_interval
        if api_client is not None:
            wait_for_control_plane(api_client, cancel=cancel, **kwargs)
            return
        with self.api_client() as client:
            wait_for_control_plane(client, cancel=cancel, **kwargs)


def new_cluster(name: str) -> Cluster:
    """Return an unprovisioned handle for the kind cluster *name*."""
    return Cluster(name)


def new_provider() -> Cluster:
    """Return an unnamed handle; set the name with Cluster.with_name."""
    return Cluster()
