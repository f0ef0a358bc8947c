"""Run compiled commands through the external engine."""

import subprocess
from typing import Optional, Sequence, Union

from pydantic import BaseModel

from ..core.errors import EngineError
from .compiler import CompiledCommand
from .context import MediaContext, default_context


class ExecutionResult(BaseModel):
    """Exit status and captured output of one engine run."""

    model_config = {"frozen": True}

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Executor:
    """Executes engine commands with captured output."""

    def __init__(self, ctx: Optional[MediaContext] = None):
        self.ctx = ctx or default_context()

    def run(
        self,
        command: Union[CompiledCommand, Sequence[str]],
        check: bool = True,
        timeout: Optional[float] = None,
    ) -> ExecutionResult:
        """
        Execute a command.

        Args:
            command: Compiled command or argument list
            check: Raise EngineError on a non-zero exit code
            timeout: Seconds before the engine is stopped (default: context timeout)

        Returns:
            Exit code and the engine's raw stdout/stderr

        Raises:
            EngineError: If the binary is missing, times out, or fails with ``check``
        """
        argv = list(command.argv) if isinstance(command, CompiledCommand) else list(command)
        timeout = self.ctx.timeout if timeout is None else timeout

        self.ctx.logger.info(f"Running FFmpeg: {' '.join(argv)}")

        try:
            process = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                stdin=subprocess.DEVNULL,
                timeout=timeout,
            )
        except FileNotFoundError as e:
            raise EngineError(f"FFmpeg not found: {e}", returncode=127) from e
        except subprocess.TimeoutExpired as e:
            raise EngineError(
                f"FFmpeg timed out after {timeout}s",
                stdout=_text(e.stdout),
                stderr=_text(e.stderr),
            ) from e

        result = ExecutionResult(
            returncode=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
        )

        if check and result.returncode != 0:
            raise EngineError(
                f"FFmpeg failed: {result.stderr}",
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        if result.ok:
            self.ctx.logger.info("FFmpeg completed successfully")
        else:
            self.ctx.logger.warning(f"FFmpeg exited with code {result.returncode}")
        return result


def _text(value) -> str:
    # TimeoutExpired carries bytes even when text=True was requested
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value
