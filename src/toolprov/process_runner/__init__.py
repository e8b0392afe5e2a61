"""
External process execution.

This package handles:
1. Spawning a program with an argument list and no shell
2. Feeding optional stdin text
3. Capturing and trimming stdout/stderr
4. Fire-and-forget launches that are never awaited
"""

from .run_process import ProcessInvocation, ProcessResult, ProcessRunner

__all__ = ["ProcessInvocation", "ProcessResult", "ProcessRunner"]
