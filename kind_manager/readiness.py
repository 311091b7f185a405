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


"""Control plane readiness: wait for kind's system pods by label selector."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum

from kubernetes.client import ApiClient, CoreV1Api
from tenacity import RetryError, Retrying, retry_if_result, stop_after_delay, wait_fixed

from kind_manager import logger
from kind_manager.constants import (
    CLUSTER_ADDONS,
    CONTROL_PLANE_COMPONENTS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_WAIT_TIMEOUT_SECONDS,
    LABEL_COMPONENT,
    LABEL_K8S_APP,
)
from kind_manager.errors import CancellationError, ReadinessTimeoutError


class SelectorOperator(Enum):
    IN = "In"
    NOT_IN = "NotIn"
    EXISTS = "Exists"
    DOES_NOT_EXIST = "DoesNotExist"


@dataclass(frozen=True)
class SelectorGroup:
    """A label match expression and the number of pods expected to match it.

    Attributes:
        key: Label key.
        operator: Match operator.
        values: Acceptable label values; also sets the expected pod count.
    """

    key: str
    operator: SelectorOperator
    values: tuple[str, ...] = ()

    @property
    def expected(self) -> int:
        return len(self.values)

    def selector(self) -> str:
        """Render the group as a Kubernetes label selector string.

        Returns:
            Selector such as ``component in (etcd,kube-apiserver)``.

        Raises:
            ValueError: If the values do not fit the operator.
        """
        if self.operator in (SelectorOperator.IN, SelectorOperator.NOT_IN):
            if not self.values:
                raise ValueError(f"selector for '{self.key}': operator {self.operator.value} requires values")
            verb = "in" if self.operator is SelectorOperator.IN else "notin"
            return f"{self.key} {verb} ({','.join(sorted(self.values))})"
        if self.values:
            raise ValueError(f"selector for '{self.key}': operator {self.operator.value} takes no values")
        if self.operator is SelectorOperator.EXISTS:
            return self.key
        return f"!{self.key}"


CONTROL_PLANE_GROUPS: tuple[SelectorGroup, ...] = (
    SelectorGroup(LABEL_COMPONENT, SelectorOperator.IN, CONTROL_PLANE_COMPONENTS),
    SelectorGroup(LABEL_K8S_APP, SelectorOperator.IN, CLUSTER_ADDONS),
)


def count_pods(core: CoreV1Api, selector: str) -> int:
    """Count pods across all namespaces matching *selector*."""
    return len(core.list_pod_for_all_namespaces(label_selector=selector).items)


def _wait_for_group(
    core: CoreV1Api,
    group: SelectorGroup,
    cancel: threading.Event,
    timeout: float,
    poll_interval: float,
) -> None:
    selector = group.selector()

    def _poll() -> int:
        if cancel.is_set():
            raise CancellationError(f"wait for pods '{selector}' cancelled")
        found = count_pods(core, selector)
        logger.debug("Pods matching '%s': %d/%d", selector, found, group.expected)
        return found

    retrying = Retrying(
        stop=stop_after_delay(timeout),
        wait=wait_fixed(poll_interval),
        retry=retry_if_result(lambda found: found < group.expected),
        sleep=cancel.wait,
    )
    try:
        retrying(_poll)
    except RetryError as err:
        last = err.last_attempt.result()
        raise ReadinessTimeoutError(
            f"timed out after {timeout}s waiting for pods '{selector}': found {last}, want {group.expected}"
        ) from err


def wait_for_control_plane(
    api_client: ApiClient,
    cancel: threading.Event | None = None,
    timeout: float = DEFAULT_WAIT_TIMEOUT_SECONDS,
    poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    groups: tuple[SelectorGroup, ...] = CONTROL_PLANE_GROUPS,
) -> None:
    """Block until every selector group has at least its expected pod count.

    Groups are waited on in order; a later group is not polled until the
    previous one is satisfied. Each group gets its own *timeout*.

    Args:
        api_client: Client connected to the cluster.
        cancel: Event that aborts the wait when set.
        timeout: Seconds to wait for each group.
        poll_interval: Seconds between polls.
        groups: Selector groups to wait for.

    Raises:
        CancellationError: If *cancel* is set before or during the wait.
        ReadinessTimeoutError: If a group is not satisfied in time.
        kubernetes.client.ApiException: If listing pods fails.
    """
    cancel = cancel or threading.Event()
    if cancel.is_set():
        raise CancellationError("wait for control plane cancelled")

    core = CoreV1Api(api_client)
    for group in groups:
        _wait_for_group(core, group, cancel, timeout, poll_interval)
        logger.info("Pods ready: %s", group.selector())
