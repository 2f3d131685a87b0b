# pierctl/utils/process_utils.py
"""Process spawning and signalling utilities"""

import logging
import os
import signal
import subprocess
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..api.exceptions import CommandFailedError
from ..constants import STOP_POLL_INTERVAL

logger = logging.getLogger(__name__)

LineCallback = Callable[[str], None]


class CommandRunner:
    """Runs external commands, streaming their output line by line"""

    def spawn(self,
              args: Sequence[str],
              env: Optional[Dict[str, str]] = None,
              cwd: Optional[Path] = None) -> subprocess.Popen:
        """
        Start a child with stdout and stderr merged into one text pipe

        Args:
            args: Command line
            env: Environment, inherited when None
            cwd: Working directory

        Returns:
            Popen handle
        """
        logger.debug(f"Spawning: {' '.join(str(a) for a in args)}")
        return subprocess.Popen(
            [str(a) for a in args],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
            env=env,
            cwd=str(cwd) if cwd else None,
        )

    def stream(self, process: subprocess.Popen, output: Optional[LineCallback] = None) -> List[str]:
        """Forward each output line to ``output`` until the pipe closes"""
        lines = []
        for line in process.stdout:
            line = line.rstrip("\n")
            lines.append(line)
            if output:
                output(line)
        process.stdout.close()
        return lines

    def run(self,
            args: Sequence[str],
            env: Optional[Dict[str, str]] = None,
            cwd: Optional[Path] = None,
            output: Optional[LineCallback] = None,
            check: bool = True) -> int:
        """
        Run a command to completion

        Args:
            args: Command line
            env: Environment
            cwd: Working directory
            output: Line callback
            check: Raise on non-zero exit

        Returns:
            Exit code

        Raises:
            CommandFailedError: If check is set and the command fails
            FileNotFoundError: If the executable does not exist
        """
        process = self.spawn(args, env=env, cwd=cwd)
        lines = self.stream(process, output)
        returncode = process.wait()

        if check and returncode != 0:
            tail = "\n".join(lines[-20:]) if output is None else ""
            raise CommandFailedError([str(a) for a in args], returncode, tail)
        return returncode


def is_process_alive(pid: int) -> bool:
    """Check whether a pid refers to a running process"""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by someone else
        return True
    return True


def wait_for_exit(pid: int, timeout: float, poll_interval: float = STOP_POLL_INTERVAL) -> bool:
    """Poll until ``pid`` is gone or ``timeout`` elapses

    Returns:
        True if the process exited in time
    """
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not is_process_alive(pid):
            return True
        time.sleep(poll_interval)
    return not is_process_alive(pid)


def terminate_process(pid: int, timeout: float) -> bool:
    """
    Stop a process with SIGTERM, escalating to SIGKILL after ``timeout``

    Args:
        pid: Process id
        timeout: Seconds to wait after SIGTERM

    Returns:
        False if no such process existed, True once it is gone
    """
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        return False

    logger.info(f"Sent SIGTERM to pier process {pid}")
    if wait_for_exit(pid, timeout):
        return True

    logger.warning(f"Process {pid} did not exit within {timeout:.0f}s, sending SIGKILL")
    try:
        os.kill(pid, signal.SIGKILL)
    except ProcessLookupError:
        return True
    wait_for_exit(pid, timeout)
    return True
