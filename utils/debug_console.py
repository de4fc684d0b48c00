"""Debug console module for capturing Rich console output to log files.

When a command runs with --debug, every line printed through the Rich console
is also written, without markup, to the debug log next to the regular
logging records.
"""

import io
import logging
import os
import re
from typing import Optional
from rich.console import Console as RichConsole

import settings

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """
    Custom Rich Console that captures all output to a debug log file.

    Terminal output keeps its formatting; a plain text copy goes to the logger.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """Render the objects to plain text without Rich markup"""
        string_buffer = io.StringIO()
        temp_console = RichConsole(
            file=string_buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', string_buffer.getvalue()).rstrip()


def configure_logging(debug: bool = False, log_file: str = settings.DEBUG_LOG_FILE) -> RichConsole:
    """
    Configure logging for a command and return the console it should print with.

    Without --debug only warnings and errors from the library reach stderr.
    With --debug the root logger appends everything to log_file and echoes it
    to stderr, and console output is captured to the same file.
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if not debug:
        root_logger.setLevel(logging.WARNING)
        return RichConsole()

    root_logger.setLevel(logging.DEBUG)
    console_handler.setLevel(logging.DEBUG)

    log_file = os.path.abspath(log_file)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # httpx logs every request line at INFO; keep the headers out of the file
    logging.getLogger("httpcore").setLevel(logging.INFO)

    # Console mirror goes to the file only, not to stderr
    capture_logger = logging.getLogger("debug_console")
    capture_logger.setLevel(logging.DEBUG)
    capture_logger.propagate = False
    for handler in capture_logger.handlers[:]:
        capture_logger.removeHandler(handler)
    capture_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    capture_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    capture_logger.addHandler(capture_handler)

    console = DebugCapturingConsole(debug_logger=capture_logger)
    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
    return console
