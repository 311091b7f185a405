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


"""Thin wrapper around sh for running external commands."""

from __future__ import annotations

from dataclasses import dataclass

import sh

from kind_manager import logger
from kind_manager.constants import EXIT_COMMAND_NOT_FOUND


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished command.

    Attributes:
        args: Full command line, executable first.
        exit_code: Process exit status (127 if the executable was not found).
        stdout: Raw standard output.
        stderr: Raw standard error.
    """

    args: tuple[str, ...]
    exit_code: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    @property
    def output(self) -> str:
        """Decoded stdout followed by stderr, for error messages."""
        return (self.stdout + self.stderr).decode(errors="replace")


def run_command(path: str, *args: str) -> CommandResult:
    """Run *path* with *args* and wait for it to finish.

    Never raises for a failing command; the exit status and captured output
    are returned instead so that callers decide how to report them.

    Args:
        path: Executable name or path.
        *args: Arguments passed to the executable.

    Returns:
        The command result.
    """
    full_cmd = (path, *args)
    logger.debug("Running: %s", " ".join(full_cmd))
    try:
        cmd = sh.Command(path)
    except sh.CommandNotFound as err:
        return CommandResult(full_cmd, EXIT_COMMAND_NOT_FOUND, stderr=f"command not found: {err}".encode())

    try:
        proc = cmd(*args, _return_cmd=True, _tty_out=False)
    except sh.ErrorReturnCode as err:
        logger.debug("%s exited with status %d", path, err.exit_code)
        return CommandResult(full_cmd, err.exit_code, err.stdout or b"", err.stderr or b"")
    return CommandResult(full_cmd, proc.exit_code, proc.stdout or b"", proc.stderr or b"")
