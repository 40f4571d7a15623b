"""Self-update against PyPI.

The latest published version is read from PyPI's JSON API. Installing
runs pip for the interpreter the tool is running under.
"""

import logging
import re
import subprocess
import sys
from dataclasses import dataclass

import httpx

from ccr_model_manager import __version__
from ccr_model_manager.errors import UpdateError

logger = logging.getLogger(__name__)

PYPI_URL = "https://pypi.org/pypi/{package}/json"

_VERSION_PIECE = re.compile(r"(\d*)(.*)")
_PRE_RELEASE = re.compile(r"([A-Za-z]*)(\d*)")


@dataclass
class UpdateInfo:
    current_version: str
    latest_version: str
    update_available: bool


@dataclass
class UpdateResult:
    """Outcome of an update attempt."""
    success: bool
    message: str
    current_version: str | None = None
    new_version: str | None = None
    error: str | None = None
    suggestion: str | None = None


def is_newer(current: str, latest: str) -> bool:
    """Compare dotted numeric versions; missing parts count as 0.

    A pre-release suffix such as ``rc1`` or ``b2`` ranks below the release
    it leads up to, so ``1.2.0rc1`` is older than ``1.2.0``.
    """
    def parse(version: str) -> tuple[list[int], tuple[str, int] | None]:
        numbers = []
        pre = None
        for piece in version.strip().lstrip("v").split("."):
            digits, rest = _VERSION_PIECE.match(piece).groups()
            numbers.append(int(digits) if digits else 0)
            if rest and pre is None:
                tag, number = _PRE_RELEASE.match(rest.lstrip("-_")).groups()
                pre = (tag.lower(), int(number) if number else 0)
        return numbers, pre

    current_parts, current_pre = parse(current)
    latest_parts, latest_pre = parse(latest)
    width = max(len(current_parts), len(latest_parts))
    current_parts += [0] * (width - len(current_parts))
    latest_parts += [0] * (width - len(latest_parts))

    if latest_parts != current_parts:
        return latest_parts > current_parts
    if latest_pre is None or current_pre is None:
        return current_pre is not None and latest_pre is None
    return latest_pre > current_pre


class UpdateChecker:
    """Checks PyPI for a newer release and installs it with pip."""

    def __init__(
        self,
        package_name: str = "ccr-model-manager",
        current_version: str = __version__,
        timeout: float = 10.0,
        install_timeout: float = 300.0,
        client: httpx.Client | None = None,
    ):
        self.package_name = package_name
        self.current_version = current_version
        self.timeout = timeout
        self.install_timeout = install_timeout
        self._client = client

    def latest_version(self) -> str:
        """Fetch the latest released version from PyPI.

        Raises:
            UpdateError: On network errors, 404, or a malformed response.
        """
        url = PYPI_URL.format(package=self.package_name)
        client = self._client or httpx.Client(timeout=self.timeout)
        try:
            response = client.get(url)
            if response.status_code == 404:
                raise UpdateError(
                    f'Package "{self.package_name}" does not exist on PyPI')
            response.raise_for_status()
            return response.json()["info"]["version"]
        except httpx.HTTPError as e:
            raise UpdateError(f"Could not fetch version info from PyPI: {e}") from e
        except (KeyError, ValueError) as e:
            raise UpdateError(f"Unexpected response from PyPI: {e}") from e
        finally:
            if self._client is None:
                client.close()

    def check(self) -> UpdateInfo:
        latest = self.latest_version()
        return UpdateInfo(
            current_version=self.current_version,
            latest_version=latest,
            update_available=is_newer(self.current_version, latest),
        )

    def perform_update(self) -> UpdateResult:
        """Upgrade to the latest release if one is available."""
        try:
            info = self.check()
        except UpdateError as e:
            return UpdateResult(False, f"Update check failed: {e}", error=str(e))

        if not info.update_available:
            return UpdateResult(
                True,
                "Already on the latest version",
                current_version=info.current_version,
                new_version=info.current_version,
            )

        command = [sys.executable, "-m", "pip", "install", "--upgrade", self.package_name]
        logger.info("Upgrading %s: %s -> %s", self.package_name,
                    info.current_version, info.latest_version)
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self.install_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            return UpdateResult(False, f"pip install failed: {e}", error=str(e))

        if completed.returncode != 0:
            output = (completed.stderr or completed.stdout or "").strip()
            if "Permission denied" in output or "EACCES" in output:
                return UpdateResult(
                    False,
                    "Insufficient permissions to install the update",
                    error=output,
                    suggestion=f"pip install --user --upgrade {self.package_name}",
                )
            return UpdateResult(False, "pip install failed", error=output)

        return UpdateResult(
            True,
            f"Updated {info.current_version} -> {info.latest_version}",
            current_version=info.current_version,
            new_version=info.latest_version,
        )
