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


"""Shared fixtures: an in-memory stand-in for the kind binary."""

from __future__ import annotations

import os
import tempfile
from types import SimpleNamespace

import pytest

from kind_manager import cluster as cluster_module
from kind_manager import kubeconfig as kubeconfig_module
from kind_manager import readiness as readiness_module
from kind_manager.runner import CommandResult

KIND_PATH = "/usr/local/bin/kind"

KUBECONFIG_TEMPLATE = """apiVersion: v1
kind: Config
clusters:
- cluster:
    server: https://127.0.0.1:6443
    insecure-skip-tls-verify: true
  name: kind-{name}
contexts:
- context:
    cluster: kind-{name}
    user: kind-{name}
  name: kind-{name}
current-context: kind-{name}
users:
- name: kind-{name}
  user:
    token: test-token
"""


class FakeKind:
    """Simulates kind subcommands and records every invocation."""

    def __init__(self) -> None:
        self.clusters: list[str] = []
        self.calls: list[tuple[str, ...]] = []
        self.failures: dict[str, tuple[int, str]] = {}
        self.kubeconfig: bytes | None = None
        self.register_on_create = True
        self.installs: list[tuple[str, str, str, str]] = []

    def __call__(self, path: str, *args: str) -> CommandResult:
        self.calls.append(args)
        full_cmd = (path, *args)
        subcommand = " ".join(args[:2])
        if subcommand in self.failures:
            code, stderr = self.failures[subcommand]
            return CommandResult(full_cmd, code, stderr=stderr.encode())

        stdout = b""
        if subcommand == "get clusters":
            stdout = "".join(f"{c}\n" for c in self.clusters).encode()
        elif subcommand == "create cluster":
            if self.register_on_create:
                self.clusters.append(_flag(args, "--name"))
        elif subcommand == "delete cluster":
            name = _flag(args, "--name")
            if name in self.clusters:
                self.clusters.remove(name)
        elif subcommand == "get kubeconfig":
            if self.kubeconfig is not None:
                stdout = self.kubeconfig
            else:
                stdout = KUBECONFIG_TEMPLATE.format(name=_flag(args, "--name")).encode()
        return CommandResult(full_cmd, 0, stdout=stdout)

    def find_or_install(self, path: str, tool: str, package: str, version: str) -> str:
        self.installs.append((path, tool, package, version))
        return KIND_PATH

    def invocations(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]


def _flag(args: tuple[str, ...], flag: str) -> str:
    return args[args.index(flag) + 1]


class FakeCoreV1Api:
    """Returns scripted pod counts per label selector.

    Each selector maps to a sequence of counts; the last count repeats.
    """

    def __init__(self, counts: dict[str, list[int]], on_list=None) -> None:
        self.counts = {selector: list(seq) for selector, seq in counts.items()}
        self.selectors: list[str] = []
        self.on_list = on_list

    def list_pod_for_all_namespaces(self, label_selector: str):
        self.selectors.append(label_selector)
        if self.on_list is not None:
            self.on_list(label_selector)
        seq = self.counts.get(label_selector, [0])
        found = seq.pop(0) if len(seq) > 1 else seq[0]
        return SimpleNamespace(items=[object()] * found)


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    """Keep KIND_* settings and temp kubeconfigs out of the host environment."""
    for key in list(os.environ):
        if key.startswith("KIND_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))


@pytest.fixture
def fake_kind(monkeypatch) -> FakeKind:
    fake = FakeKind()
    monkeypatch.setattr(cluster_module, "run_command", fake)
    monkeypatch.setattr(kubeconfig_module, "run_command", fake)
    monkeypatch.setattr(cluster_module, "find_or_install", fake.find_or_install)
    return fake


@pytest.fixture
def fake_core(monkeypatch):
    """Install a FakeCoreV1Api factory; call it with scripted counts."""
    created: list[FakeCoreV1Api] = []

    def _install(counts: dict[str, list[int]], on_list=None) -> FakeCoreV1Api:
        core = FakeCoreV1Api(counts, on_list)
        created.append(core)
        monkeypatch.setattr(readiness_module, "CoreV1Api", lambda api_client: core)
        return core

    return _install
