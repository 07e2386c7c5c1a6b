"""sink.py - File destination for qtrace output.

The shared logger writes to a well-known file in the system temp directory,
``<tmp>/q``, so that output can be followed from another terminal::

    tail -f /tmp/q

Any object with a ``write(str)`` method can be handed to a Logger instead;
FileSink only adds lazy opening in append mode.
"""

import logging
import os
import tempfile
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "q"


def default_path() -> str:
    """Return the path of the shared log file, ``<tempdir>/q``."""
    return os.path.join(tempfile.gettempdir(), DEFAULT_FILENAME)


class FileSink:
    """Append text to a file on disk.

    The file and any missing parent directories are created on the first
    write, not on construction, so building the shared logger never touches
    the filesystem until something is actually logged.

    Attributes:
        _path (str): Path to the output file.
        _encoding (str): File encoding. Defaults to ``"utf-8"``.
        _file: Open handle, or ``None`` until the first write.

    Example:
        >>> from qtrace.sink import FileSink
        >>> sink = FileSink("/tmp/qtrace_demo/q")
    """

    def __init__(self, path: Optional[str] = None, encoding: str = "utf-8") -> None:
        """Initialise the sink.

        Args:
            path: Path to the output file. Defaults to ``default_path()``.
            encoding: Character encoding for the output file.
        """
        self._path = path or default_path()
        self._encoding = encoding
        self._file = None

    @property
    def path(self) -> str:
        return self._path

    def write(self, text: str) -> int:
        """Append ``text`` to the file, opening it first if needed.

        Raises:
            OSError: If the file can't be opened or written.
        """
        if self._file is None:
            self._open()
        return self._file.write(text)

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        """Close the underlying file. Further writes reopen it."""
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self) -> "FileSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"FileSink({self._path!r})"

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _open(self) -> None:
        parent = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(parent, exist_ok=True)
        self._file = open(self._path, "a", encoding=self._encoding)
        logger.debug("opened qtrace log file %s", self._path)
