"""
Process runner implementation.

Every launch is reported through a ProcessResult; errors never escape the runner.
"""

import dataclasses
import logging
import subprocess
from typing import Optional, Sequence, Tuple

from toolprov.toolprov_logger import ToolprovLogger

NEWLINE_CHARS = "\r\n"


@dataclasses.dataclass(frozen=True)
class ProcessInvocation:
    """
    One request to run a program. Created per call, never reused.
    """

    program: str
    arguments: Tuple[str, ...] = ()
    stdin: Optional[str] = None
    capture_output: bool = True

    @property
    def command(self) -> list:
        return [self.program, *self.arguments]


@dataclasses.dataclass
class ProcessResult:
    """
    Outcome of a ProcessInvocation.

    ``output`` and ``error`` are only populated in capture mode. ``success``
    reflects whether launching and talking to the process worked, not the
    process's exit code.
    """

    invocation: ProcessInvocation
    output: str = ""
    error: str = ""
    exception: Optional[BaseException] = None
    return_code: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.exception is None

    @classmethod
    def failed(
        cls, invocation: ProcessInvocation, exception: BaseException
    ) -> "ProcessResult":
        return cls(
            invocation=invocation,
            output="",
            error=str(exception),
            exception=exception,
        )


def _trim(text: Optional[str]) -> str:
    return (text or "").strip(NEWLINE_CHARS)


class ProcessRunner:
    """
    Runs external programs synchronously or detached.
    """

    def __init__(self, logger: ToolprovLogger):
        self.logger = logger

    def run(
        self,
        program: str,
        arguments: Sequence[str] = (),
        stdin: Optional[str] = None,
        capture_output: bool = True,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run {program} to completion.

        Args:
            program: Path of the executable
            arguments: Positional arguments, passed without shell interpretation
            stdin: Text written to the process followed by a line terminator
            capture_output: Redirect and collect stdout/stderr
            timeout: Seconds after which the process is killed

        Returns:
            ProcessResult; check ``success`` instead of expecting exceptions
        """
        invocation = ProcessInvocation(
            program=program,
            arguments=tuple(arguments),
            stdin=stdin,
            capture_output=capture_output,
        )
        return self.execute(invocation, timeout=timeout)

    def execute(
        self, invocation: ProcessInvocation, timeout: Optional[float] = None
    ) -> ProcessResult:
        pipe = subprocess.PIPE if invocation.capture_output else None
        try:
            process = subprocess.Popen(
                invocation.command,
                stdin=subprocess.PIPE if invocation.stdin is not None else None,
                stdout=pipe,
                stderr=pipe,
                encoding="utf-8",
                errors="replace",
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
        except Exception as e:
            self.logger.log(
                f"Could not start {invocation.program}: {e}", logging.DEBUG
            )
            return ProcessResult.failed(invocation, e)

        with process:
            stdin_text = (
                invocation.stdin + "\n" if invocation.stdin is not None else None
            )
            try:
                # communicate() reads both streams to EOF and then waits for
                # exit, so output buffered at exit time is not lost
                stdout, stderr = process.communicate(stdin_text, timeout=timeout)
            except subprocess.TimeoutExpired as e:
                process.kill()
                process.communicate()
                self.logger.log(
                    f"{invocation.program} exceeded {timeout}s and was killed",
                    logging.WARNING,
                )
                return ProcessResult.failed(invocation, e)
            except Exception as e:
                process.kill()
                self.logger.log(
                    f"Communication with {invocation.program} failed: {e}",
                    logging.DEBUG,
                )
                return ProcessResult.failed(invocation, e)

        return ProcessResult(
            invocation=invocation,
            output=_trim(stdout) if invocation.capture_output else "",
            error=_trim(stderr) if invocation.capture_output else "",
            return_code=process.returncode,
        )

    def run_in_background(
        self,
        program: str,
        arguments: Sequence[str] = (),
        stdin: Optional[str] = None,
    ) -> ProcessResult:
        """
        Launch {program} and return without waiting for it to exit.

        stdout and stderr are never redirected. When {stdin} is given it is
        written and the stream closed so no pipe handle is left open.
        """
        invocation = ProcessInvocation(
            program=program,
            arguments=tuple(arguments),
            stdin=stdin,
            capture_output=False,
        )
        try:
            process = subprocess.Popen(
                invocation.command,
                stdin=subprocess.PIPE if stdin is not None else None,
                encoding="utf-8",
                errors="replace",
                creationflags=getattr(subprocess, "CREATE_NO_WINDOW", 0),
            )
            if stdin is not None:
                with process.stdin:
                    process.stdin.write(stdin + "\n")
        except Exception as e:
            self.logger.log(
                f"Could not start {invocation.program} in background: {e}",
                logging.DEBUG,
            )
            return ProcessResult.failed(invocation, e)

        self.logger.log(
            f"Started {invocation.program} in background (pid {process.pid})",
            logging.DEBUG,
        )
        return ProcessResult(invocation=invocation)
