import os
import tempfile

from utils.logging_setup import get_logger

logger = get_logger("file_system")


class LocalFileSystem:
    """File-system capability used by the scanner and the translation file manager.

    All methods raise ``OSError`` on failure; callers attach translation context.
    """

    def __init__(self, encoding="utf-8"):
        self.encoding = encoding

    def exists(self, path) -> bool:
        return os.path.exists(path)

    def is_file(self, path) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path) -> bool:
        return os.path.isdir(path)

    def read_text(self, path) -> str:
        with open(path, "r", encoding=self.encoding) as f:
            return f.read()

    def write_text(self, path, content: str):
        """Replace the file at ``path`` with ``content``.

        The content goes to a temporary file in the target directory which is then
        renamed over the target, so readers see either the old or the new file.
        """
        directory = os.path.dirname(os.path.abspath(path))
        fd, temp_path = tempfile.mkstemp(prefix=".tmp-", suffix=os.path.basename(path), dir=directory)
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="") as f:
                f.write(content)
            if os.path.exists(path):
                # Keep the permissions of the file being replaced
                os.chmod(temp_path, os.stat(path).st_mode & 0o7777)
            else:
                # mkstemp creates 0600 files; use what a plain open() would have created
                umask = os.umask(0)
                os.umask(umask)
                os.chmod(temp_path, 0o666 & ~umask)
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
        logger.debug(f"Wrote {len(content)} characters to {path}")

    def delete(self, path):
        os.remove(path)

    def list_directories(self, path) -> list[str]:
        """Full paths of the immediate subdirectories of ``path``, in listing order."""
        with os.scandir(path) as entries:
            return [entry.path for entry in entries if entry.is_dir()]

    def list_files(self, path) -> list[str]:
        """Full paths of the regular files directly under ``path``, in listing order."""
        with os.scandir(path) as entries:
            return [entry.path for entry in entries if entry.is_file()]
