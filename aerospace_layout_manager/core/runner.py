"""
Async subprocess runner for external commands.

Every interaction with the desktop (aerospace, system_profiler, osascript,
open) goes through CommandRunner so tests can substitute a single mock.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from ..errors import CommandError
from ..logging_config import log_subprocess_call

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class CommandResult:
    """Completed external command."""
    command: List[str]
    returncode: int
    stdout: str
    stderr: str


class CommandRunner:
    """Runs external commands with asyncio.create_subprocess_exec."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize command runner.

        Args:
            timeout: Seconds to wait for a command before killing it
        """
        self.timeout = timeout

    async def run(
        self,
        *args: Any,
        check: bool = True,
        timeout: Optional[float] = None
    ) -> CommandResult:
        """
        Run a command to completion.

        Args:
            *args: Program and arguments (converted to str)
            check: Raise CommandError on nonzero exit status
            timeout: Override the runner timeout

        Returns:
            CommandResult with decoded stdout/stderr

        Raises:
            CommandError: If the program is missing, times out, or fails with check=True
        """
        cmd = [str(arg) for arg in args]
        timeout = self.timeout if timeout is None else timeout

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise CommandError(cmd, None, message=f"Command not found: {cmd[0]}")

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise CommandError(
                cmd, None, message=f"Command timed out after {timeout}s: {' '.join(cmd)}"
            )

        result = CommandResult(
            command=cmd,
            returncode=proc.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        log_subprocess_call(cmd, result, logger)

        if check and result.returncode != 0:
            raise CommandError(cmd, result.returncode, result.stderr.strip())

        return result

    async def run_json(self, *args: Any, timeout: Optional[float] = None) -> Any:
        """
        Run a command and parse its stdout as JSON.

        Raises:
            CommandError: If the command fails or prints invalid JSON
        """
        result = await self.run(*args, timeout=timeout)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise CommandError(
                result.command,
                result.returncode,
                result.stderr,
                message=f"Invalid JSON from {result.command[0]}: {e}",
            )
