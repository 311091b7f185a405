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


"""Error types raised by cluster lifecycle operations."""

from __future__ import annotations


class KindError(RuntimeError):
    """Base class for every failure surfaced by kind_manager."""


class ToolResolutionError(KindError):
    """The kind binary could not be found or installed."""


class InvocationError(KindError):
    """A kind subcommand exited non-zero.

    Attributes:
        operation: Short name of the kind subcommand (e.g. ``create cluster``).
        cluster: Name of the cluster the command targeted.
        exit_code: Process exit status.
        output: Captured stdout and stderr.
    """

    def __init__(self, operation: str, cluster: str, exit_code: int, output: str) -> None:
        self.operation = operation
        self.cluster = cluster
        self.exit_code = exit_code
        self.output = output
        super().__init__(
            f"kind: {operation} for cluster '{cluster}' failed: exit status {exit_code}: {output.strip()}"
        )


class ConsistencyError(KindError):
    """kind reported success but the cluster is not listed afterwards."""


class CredentialExtractionError(KindError):
    """The kubeconfig could not be captured, written, or parsed."""


class ReadinessTimeoutError(KindError):
    """Control plane workloads did not come up before the deadline."""


class CancellationError(KindError):
    """The operation was cancelled by the caller."""


class TeardownError(KindError):
    """Cluster deletion or kubeconfig removal failed."""
