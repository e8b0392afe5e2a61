"""
Logger wrapper used by every toolprov component.
"""

import inspect
import logging
from datetime import datetime

from pydantic import BaseModel


class LogLine(BaseModel):
    """
    Represents a line in the toolprov log
    """

    time: str
    level: str
    caller_file: str
    caller_name: str
    caller_line: int
    message: str


class ToolprovLogger:
    """
    Logger class
    """

    def __init__(self, name: str = "toolprov", level: int = logging.INFO) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

    def log(self, debug_message: str, level: int) -> None:
        """
        Log the message at the given level, tagged with the caller's location
        """
        if not self.logger.isEnabledFor(level):
            return

        debug_message = debug_message.replace("'", '"').replace("\n", " ")

        # Collect details about the callee
        curframe = inspect.currentframe()
        calframe = inspect.getouterframes(curframe, 2)
        caller_file = calframe[1][1].replace("\\", "/").split("/")[-1]
        caller_line = calframe[1][2]
        caller_name = calframe[1][3]

        debug_log_line = LogLine(
            time=str(datetime.now()),
            level=logging.getLevelName(level),
            caller_file=caller_file,
            caller_name=caller_name,
            caller_line=caller_line,
            message=debug_message,
        )

        self.logger.log(
            level=level,
            msg=debug_log_line.model_dump_json(),
        )
