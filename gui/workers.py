"""Worker objects for running backend calls off the GUI thread."""

import logging
from typing import Any, Callable

from PySide6.QtCore import QObject, Signal

from core.api_client import ApiError

logger = logging.getLogger(__name__)


class RemoteCallWorker(QObject):
    """Runs one API call in a worker thread and reports the result."""

    finished = Signal(object)  # call result
    error = Signal(str)

    def __init__(self, call: Callable[..., Any], *args, **kwargs):
        super().__init__()
        self.call = call
        self.args = args
        self.kwargs = kwargs

    def run(self):
        """Run the call in the worker thread."""
        try:
            result = self.call(*self.args, **self.kwargs)
        except ApiError as e:
            logger.error(f"Remote call failed: {e}")
            self.error.emit(str(e))
            return
        except Exception as e:
            logger.error(f"Remote call crashed: {e}", exc_info=True)
            self.error.emit(f"Unexpected error: {e}")
            return
        self.finished.emit(result)
