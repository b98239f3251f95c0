# certgen/services/trust.py

"""
Operating system trust store installers.

One class per platform, chosen once at start-up with select_trust_installer().
Each installer runs the platform tool; when the tool reports a permission
problem the remaining steps are retried exactly once with elevation (sudo on
Unix, an elevated PowerShell Start-Process on Windows). Any other failure is
raised immediately.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from certgen.constants import DARWIN_SYSTEM_KEYCHAIN, LINUX_CA_CERT_DEST
from certgen.services.trust_errors import (
    TrustInstallError,
    TrustPermissionDeniedError,
    UnsupportedPlatformError,
)

log = logging.getLogger(__name__)


class TrustInstaller(ABC):
    """
    Installs a root certificate into the operating system trust store.
    """
    platform: str = ""
    permission_markers: tuple[str, ...] = ("permission denied", "not permitted")

    def install_root_certificate(self, path: Union[str, Path]) -> None:
        """
        Trust the PEM certificate at `path` system wide.

        Raises:
            TrustPermissionDeniedError: Still refused after the elevated retry.
            TrustInstallError: Any other tool failure.
        """
        cert_path = str(Path(path).resolve())
        elevated = False

        for command in self._commands(cert_path):
            result = _run_command(self._elevate(command) if elevated else command)

            if result.returncode == 0:
                continue

            if elevated or not self._is_permission_denied(result):
                self._raise_failure(command, result, elevated=elevated)

            log.info("%s refused without elevation, retrying with elevation", command[0])
            elevated = True
            result = _run_command(self._elevate(command))

            if result.returncode != 0:
                self._raise_failure(command, result, elevated=True)

        log.debug("Installed %s into the %s trust store", cert_path, self.platform)

    @abstractmethod
    def _commands(self, cert_path: str) -> list[list[str]]:
        """ The unelevated command sequence that installs `cert_path` """

    @abstractmethod
    def _elevate(self, command: list[str]) -> list[str]:
        """ The same command, run with elevated privileges """

    def _is_permission_denied(self, result: subprocess.CompletedProcess) -> bool:
        low = _output(result).lower()
        return any(marker in low for marker in self.permission_markers)

    def _raise_failure(
            self,
            command: list[str],
            result: subprocess.CompletedProcess,
            *,
            elevated: bool
        ) -> None:
        msg = _output(result) or f"exit status {result.returncode}"

        if self._is_permission_denied(result):
            raise TrustPermissionDeniedError(
                f"{command[0]} was denied permission{' after elevation' if elevated else ''}: {msg}"
            )

        raise TrustInstallError(f"{command[0]} failed: {msg}")


class DarwinTrustInstaller(TrustInstaller):
    platform = "darwin"
    permission_markers = ("authorization", "permission")

    def __init__(self, keychain: str = DARWIN_SYSTEM_KEYCHAIN):
        self.keychain = keychain

    def _commands(self, cert_path: str) -> list[list[str]]:
        return [[
            "security", "add-trusted-cert",
            "-d",
            "-r", "trustRoot",
            "-k", self.keychain,
            cert_path,
        ]]

    def _elevate(self, command: list[str]) -> list[str]:
        return ["sudo", *command]


class LinuxTrustInstaller(TrustInstaller):
    platform = "linux"

    def __init__(self, destination: str = LINUX_CA_CERT_DEST):
        self.destination = destination

    def _commands(self, cert_path: str) -> list[list[str]]:
        return [
            ["cp", cert_path, self.destination],
            ["update-ca-certificates"],
        ]

    def _elevate(self, command: list[str]) -> list[str]:
        return ["sudo", *command]


class WindowsTrustInstaller(TrustInstaller):
    platform = "windows"
    permission_markers = ("access is denied", "0x80070005")

    def _commands(self, cert_path: str) -> list[list[str]]:
        return [["certutil", "-addstore", "-f", "ROOT", cert_path]]

    def _elevate(self, command: list[str]) -> list[str]:
        # -PassThru hands back the elevated process so its exit code becomes ours
        arguments = subprocess.list2cmdline(command[1:])
        script = (
            f"$p = Start-Process -FilePath {_ps_quote(command[0])} "
            f"-ArgumentList {_ps_quote(arguments)} -Verb RunAs -Wait -PassThru; "
            "exit $p.ExitCode"
        )
        return ["powershell", "-NoProfile", "-Command", script]


def select_trust_installer(platform: Optional[str] = None) -> TrustInstaller:
    """
    Pick the installer for `platform` (default: the running interpreter's sys.platform)

    Raises:
        UnsupportedPlatformError
    """
    platform = platform or sys.platform

    if platform.startswith("darwin"):
        return DarwinTrustInstaller()
    if platform.startswith("linux"):
        return LinuxTrustInstaller()
    if platform.startswith("win32") or platform.startswith("cygwin") or platform == "windows":
        return WindowsTrustInstaller()

    raise UnsupportedPlatformError(f"Trust installation is not supported on {platform!r}")


# ---------------------
# Helpers
# ---------------------

def _run_command(command: list[str]) -> subprocess.CompletedProcess:
    """ Run a command and capture the output """
    log.debug("Running %s", " ".join(command))

    try:
        return subprocess.run(
            command,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=False
        )
    except FileNotFoundError:
        raise TrustInstallError(f"Command not found: {command[0]!r}. Is it installed?")


def _output(result: subprocess.CompletedProcess) -> str:
    return (result.stderr or result.stdout or "").strip()


def _ps_quote(value: str) -> str:
    """ PowerShell single-quoted string literal """
    return "'" + value.replace("'", "''") + "'"
