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


from __future__ import annotations

import os

import pytest

from kind_manager import installer
from kind_manager.constants import DEFAULT_KIND_VERSION
from kind_manager.errors import ToolResolutionError


class FakeSh:
    """Stands in for the sh module: a fixed PATH and a scripted ``go``."""

    class ErrorReturnCode(Exception):
        def __init__(self, stderr: bytes) -> None:
            super().__init__(stderr)
            self.stderr = stderr

    def __init__(self, on_path: dict[str, str], gobin: str = "", gopath: str = "", install_ok: bool = True) -> None:
        self.on_path = dict(on_path)
        self.gobin = gobin
        self.gopath = gopath
        self.install_ok = install_ok
        self.go_calls: list[tuple[str, ...]] = []

    def which(self, program: str):
        return self.on_path.get(program)

    def go(self, *args: str) -> str:
        self.go_calls.append(args)
        if args[0] == "install":
            if not self.install_ok:
                raise self.ErrorReturnCode(b"module sigs.k8s.io/kind: not found")
            bin_dir = self.gobin or os.path.join(self.gopath, "bin")
            os.makedirs(bin_dir, exist_ok=True)
            binary = os.path.join(bin_dir, "kind")
            with open(binary, "w") as f:
                f.write("#!/bin/sh\n")
            os.chmod(binary, 0o755)
            return ""
        if args == ("env", "GOBIN"):
            return f"{self.gobin}\n"
        if args == ("env", "GOPATH"):
            return f"{self.gopath}\n"
        raise AssertionError(f"unexpected go {args}")


@pytest.fixture
def use_sh(monkeypatch):
    def _install(fake: FakeSh) -> FakeSh:
        monkeypatch.setattr(installer, "sh", fake)
        return fake

    return _install


def test_returns_existing_binary_without_installing(use_sh):
    fake = use_sh(FakeSh({"kind": "/usr/local/bin/kind", "go": "/usr/bin/go"}))

    path = installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "v0.17.0")

    assert path == "/usr/local/bin/kind"
    assert fake.go_calls == []


def test_empty_path_falls_back_to_tool_name(use_sh):
    use_sh(FakeSh({"kind": "/usr/local/bin/kind"}))

    assert installer.find_or_install("", "kind", "sigs.k8s.io/kind", "") == "/usr/local/bin/kind"


def test_installs_into_gobin(use_sh, tmp_path):
    gobin = str(tmp_path / "gobin")
    fake = use_sh(FakeSh({"go": "/usr/bin/go"}, gobin=gobin))

    path = installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "v0.20.0")

    assert path == os.path.join(gobin, "kind")
    assert fake.go_calls[0] == ("install", "sigs.k8s.io/kind@v0.20.0")


def test_installs_into_gopath_bin(use_sh, tmp_path):
    gopath = str(tmp_path / "go")
    use_sh(FakeSh({"go": "/usr/bin/go"}, gopath=gopath))

    path = installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "v0.20.0")

    assert path == os.path.join(gopath, "bin", "kind")


def test_empty_version_uses_pinned_default(use_sh, tmp_path):
    fake = use_sh(FakeSh({"go": "/usr/bin/go"}, gobin=str(tmp_path)))

    installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "")

    assert fake.go_calls[0] == ("install", f"sigs.k8s.io/kind@{DEFAULT_KIND_VERSION}")


def test_missing_go_is_resolution_error(use_sh):
    use_sh(FakeSh({}))

    with pytest.raises(ToolResolutionError, match="go is not available"):
        installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "v0.17.0")


def test_install_failure_is_resolution_error(use_sh, tmp_path):
    use_sh(FakeSh({"go": "/usr/bin/go"}, gobin=str(tmp_path), install_ok=False))

    with pytest.raises(ToolResolutionError, match="not found"):
        installer.find_or_install("kind", "kind", "sigs.k8s.io/kind", "v0.17.0")
