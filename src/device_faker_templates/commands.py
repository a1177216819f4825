"""Shell command execution used by the download pipeline."""

import asyncio

from device_faker_templates.exceptions import CommandError
from device_faker_templates.log_utils import logger


class CommandExecutor:
    """Runs shell command lines and returns their standard output."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    async def execute(self, command_line: str) -> str:
        """
        Run `command_line` through the shell and wait for it to finish.

        Returns:
            str: Decoded standard output.

        Raises:
            CommandError: If the process cannot be started or exits non-zero.
        """
        logger.debug(f"Executing: {command_line}")
        try:
            process = await asyncio.create_subprocess_shell(
                command_line,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CommandError(
                f"Failed to start command: {e}", command=command_line
            ) from e

        stdout, stderr = await process.communicate()
        stderr_text = stderr.decode(self.encoding, errors="replace").strip()
        if process.returncode != 0:
            raise CommandError(
                f"Command exited with status {process.returncode}",
                command=command_line,
                returncode=process.returncode,
                stderr=stderr_text,
            )
        return stdout.decode(self.encoding, errors="replace")
