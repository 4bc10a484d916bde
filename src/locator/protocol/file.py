"""Handler for ``file:`` locators on the local filesystem."""

import logging
from pathlib import Path
from typing import BinaryIO

from ..handlers import StreamHandlerBase
from ..value import Locator

logger = logging.getLogger(__name__)


class FileConnection:
    """Connection reading a local file.

    Attributes:
        path: The file to read.
    """

    def __init__(self, path: Path):
        self.path = path
        self._connected = False

    def connect(self) -> None:
        """Check that the file exists and is readable.

        Raises:
            FileNotFoundError: If the path does not exist.
            IsADirectoryError: If the path is a directory.
        """
        if self._connected:
            return
        if not self.path.exists():
            raise FileNotFoundError(f"No such file: '{self.path}'")
        if self.path.is_dir():
            raise IsADirectoryError(f"Is a directory: '{self.path}'")
        self._connected = True
        logger.debug("Opened file connection.", extra={"file_path": str(self.path)})

    def open_stream(self) -> BinaryIO:
        self.connect()
        return Path.open(self.path, "rb")

    def get_content(self) -> bytes:
        self.connect()
        return self.path.read_bytes()


class Handler(StreamHandlerBase):
    """Handler for ``file:`` locators.

    The locator path is used as a local filesystem path; the host is ignored.
    """

    def open_connection(self, locator: Locator) -> FileConnection:
        return FileConnection(Path(locator.path))
