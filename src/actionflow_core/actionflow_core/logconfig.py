# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Logging setup shared by the command line tools.

Records are stamped with the workflow file currently being processed through
:class:`WorkflowContextFilter`, so messages emitted deep inside the parser or
linter can be traced back to the file that produced them.
"""

import logging
import logging.handlers
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(workflow_file)s] %(message)s"

DEFAULT_MAX_LOG_FILE_BYTES = 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 3

workflow_file_var: ContextVar[str] = ContextVar("workflow_file", default="")


class WorkflowContext:
    """Set and clear the workflow file reported on log records."""

    @staticmethod
    def set(path: str):
        workflow_file_var.set(path)

    @staticmethod
    def clear():
        workflow_file_var.set("")

    @staticmethod
    def get() -> str:
        return workflow_file_var.get()


class WorkflowContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.workflow_file = WorkflowContext.get()
        return True


def configure_logging(
    level: str = "WARNING",
    log_file: Optional[str] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
) -> logging.Logger:
    """Configure the root logger with a stderr handler and an optional rotating file.

    Handlers installed by a previous call are replaced, so calling this twice
    does not duplicate output.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_actionflow", False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=DEFAULT_MAX_LOG_FILE_BYTES if max_bytes is None else max_bytes,
                backupCount=DEFAULT_LOG_BACKUP_COUNT if backup_count is None else backup_count,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(WorkflowContextFilter())
        handler._actionflow = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(level.upper())
    return root
