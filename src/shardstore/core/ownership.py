# src/shardstore/core/ownership.py
"""Post-write ownership and permission enforcement via external commands.

Runs ``chown`` and ``chmod`` as child processes after a blob is written.
Each process is waited on synchronously. A non-zero exit, a timeout, or a
missing executable raises OwnershipError carrying the captured stderr.
The blob itself stays in place; callers must treat it as created.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import structlog

from shardstore.contracts.errors import OwnershipError

__all__ = ["CommandOwnershipEnforcer"]

logger = structlog.get_logger(__name__)


class CommandOwnershipEnforcer:
    """Apply owner and/or permissions with the platform's chown/chmod.

    Unset (None or blank) settings are skipped. With neither set, apply()
    does nothing.

    Args:
        owner: Target owner, ``user`` or ``user:group``
        permissions: Mode passed verbatim to chmod, e.g. ``"0640"``
        chown_command: Executable used for ownership changes
        chmod_command: Executable used for permission changes
        timeout: Seconds to wait for each command; None waits indefinitely
    """

    def __init__(
        self,
        owner: str | None = None,
        permissions: str | None = None,
        *,
        chown_command: str = "chown",
        chmod_command: str = "chmod",
        timeout: float | None = None,
    ) -> None:
        self.owner = owner.strip() if owner and owner.strip() else None
        self.permissions = permissions.strip() if permissions and permissions.strip() else None
        self._chown_command = chown_command
        self._chmod_command = chmod_command
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return self.owner is not None or self.permissions is not None

    def apply(self, path: Path) -> None:
        """Run chown then chmod on path, as configured.

        Raises:
            OwnershipError: If a command exits non-zero, times out, or
                cannot be started
        """
        if self.owner is not None:
            self._run([self._chown_command, self.owner, str(path)])
        if self.permissions is not None:
            self._run([self._chmod_command, self.permissions, str(path)])

    def _run(self, command: list[str]) -> None:
        logger.debug("Running ownership command", command=command)
        try:
            # Context manager closes every pipe and reaps the child on all exit paths
            with subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            ) as process:
                try:
                    _, stderr = process.communicate(timeout=self._timeout)
                except subprocess.TimeoutExpired as e:
                    process.kill()
                    process.communicate()
                    logger.error("Ownership command interrupted", command=command, timeout=self._timeout)
                    raise OwnershipError(
                        command,
                        f"interrupted after {self._timeout}s",
                        returncode=process.returncode,
                    ) from e
                except KeyboardInterrupt:
                    process.kill()
                    process.wait()
                    raise
        except (FileNotFoundError, PermissionError) as e:
            raise OwnershipError(command, "could not be started", stderr=str(e)) from e

        if process.returncode != 0:
            text = stderr.decode(errors="replace")
            logger.error(
                "Ownership command failed",
                command=command,
                returncode=process.returncode,
                stderr=text.strip(),
            )
            raise OwnershipError(
                command,
                f"exited with status {process.returncode}",
                returncode=process.returncode,
                stderr=text,
            )

    def __repr__(self) -> str:
        return f"CommandOwnershipEnforcer(owner={self.owner!r}, permissions={self.permissions!r})"
