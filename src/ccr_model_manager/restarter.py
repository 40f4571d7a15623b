"""Restarting the Claude Code Router process."""

import logging
import shlex
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class RestartResult:
    """Outcome of running a CCR command."""
    success: bool
    message: str
    error: str | None = None


class ProcessRestarter:
    """Runs CCR's own commands to restart it or check it is installed.

    Failures are reported in the result, never raised, so the caller can
    print manual-restart guidance instead.
    """

    def __init__(
        self,
        restart_command: str = "ccr restart",
        timeout: float = 30.0,
        status_command: str = "ccr --version",
        status_timeout: float = 5.0,
    ):
        self.restart_command = restart_command
        self.timeout = timeout
        self.status_command = status_command
        self.status_timeout = status_timeout

    def restart(self) -> RestartResult:
        """Restart CCR, streaming its output to the terminal."""
        error = self._run(self.restart_command, self.timeout, capture=False)
        if error:
            return RestartResult(False, "Could not restart CCR automatically", error)
        return RestartResult(True, "CCR restarted")

    def status(self) -> RestartResult:
        """Check that the ``ccr`` command is installed and responds."""
        error = self._run(self.status_command, self.status_timeout, capture=True)
        if error:
            return RestartResult(False, "CCR is not available", error)
        return RestartResult(True, "CCR is installed and available")

    def _run(self, command: str, timeout: float, capture: bool) -> str | None:
        """Run a command; return an error description or None on success."""
        logger.debug("Running %r (timeout %ss)", command, timeout)
        try:
            subprocess.run(
                shlex.split(command),
                check=True,
                timeout=timeout,
                capture_output=capture,
            )
        except FileNotFoundError:
            error = f"Command not found: {shlex.split(command)[0]}"
        except subprocess.TimeoutExpired:
            error = f"'{command}' timed out after {timeout:g}s"
        except subprocess.CalledProcessError as e:
            error = f"'{command}' exited with status {e.returncode}"
        else:
            return None
        logger.warning(error)
        return error
