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


"""Locate the kind binary, installing it with ``go install`` when missing."""

from __future__ import annotations

import os
from pathlib import Path

import sh

from kind_manager import logger
from kind_manager.constants import DEFAULT_KIND_VERSION, KIND_BINARY
from kind_manager.errors import ToolResolutionError


def _go_bin_dir() -> Path:
    """Return the directory ``go install`` drops binaries into."""
    gobin = str(sh.go("env", "GOBIN")).strip()
    if gobin:
        return Path(gobin)
    return Path(str(sh.go("env", "GOPATH")).strip()) / "bin"


def find_or_install(path: str, tool: str, package: str, version: str) -> str:
    """Resolve an executable, installing it from a Go module if absent.

    Args:
        path: Preferred path or command name; falls back to *tool* when empty.
        tool: Binary name produced by the Go module (e.g. ``kind``).
        package: Go module path (e.g. ``sigs.k8s.io/kind``).
        version: Module version to install; falls back to the pinned default.

    Returns:
        Path of a usable executable. May differ from *path* after installation.

    Raises:
        ToolResolutionError: If the binary is absent and cannot be installed.
    """
    path = path or tool or KIND_BINARY
    version = version or DEFAULT_KIND_VERSION

    resolved = sh.which(path)
    if resolved:
        return str(resolved)

    logger.info("%s not found at '%s', installing %s@%s", tool, path, package, version)
    if not sh.which("go"):
        raise ToolResolutionError(
            f"{tool} not found at '{path}' and go is not available to install {package}@{version}"
        )

    try:
        sh.go("install", f"{package}@{version}")
        candidate = _go_bin_dir() / tool
    except sh.ErrorReturnCode as err:
        raise ToolResolutionError(
            f"go install {package}@{version} failed: {err.stderr.decode(errors='replace').strip()}"
        ) from err

    if candidate.is_file() and os.access(candidate, os.X_OK):
        logger.info("Installed %s at %s", tool, candidate)
        return str(candidate)

    resolved = sh.which(tool)
    if resolved:
        return str(resolved)
    raise ToolResolutionError(f"{tool} installed from {package}@{version} but not found on PATH or in {candidate.parent}")
