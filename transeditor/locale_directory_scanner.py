import os

from babel import Locale, UnknownLocaleError

from transeditor.errors import LocaleDirectoryMissingError, TranslationIOError
from utils.file_system import LocalFileSystem
from utils.logging_setup import get_logger

logger = get_logger("locale_directory_scanner")


def is_hidden(name: str) -> bool:
    return name.startswith('.') or name.startswith('__')


class LocaleDirectoryScanner:
    """Discovers locales and translation groups in a language file tree.

    The tree has one subdirectory per locale under the root, and one file per
    translation group inside each locale directory::

        <root>/<locale>/<group>.<ext>

    Listing order is whatever the file system returns; nothing here sorts.
    """

    def __init__(self, file_system=None):
        self.file_system = file_system or LocalFileSystem()

    def list_locales(self, root_path) -> list[str]:
        """List the locale identifiers available under ``root_path``.

        Args:
            root_path: Directory containing one subdirectory per locale

        Returns:
            list: Base names of the subdirectories, hidden directories excluded

        Raises:
            LocaleDirectoryMissingError: if ``root_path`` is not a directory
        """
        if not self.file_system.is_dir(root_path):
            raise LocaleDirectoryMissingError(root_path, f"Language file directory not found: {root_path}")
        try:
            directories = self.file_system.list_directories(root_path)
        except OSError as e:
            raise TranslationIOError(root_path, e) from e

        locales = [os.path.basename(d) for d in directories]
        locales = [locale for locale in locales if not is_hidden(locale)]
        logger.debug(f"Found {len(locales)} locales in {root_path}: {locales}")
        return locales

    def list_groups(self, root_path, fallback_locale, extension) -> list[str]:
        """List the translation groups defined by the fallback locale.

        A group exists exactly when the fallback locale directory holds a file
        named ``<group><extension>``. Files in other locales do not define groups.

        Raises:
            LocaleDirectoryMissingError: if the fallback locale directory does not exist
        """
        locale_dir = os.path.join(root_path, fallback_locale)
        if not self.file_system.is_dir(locale_dir):
            raise LocaleDirectoryMissingError(
                locale_dir, f"Fallback locale directory not found: {locale_dir}")
        try:
            files = self.file_system.list_files(locale_dir)
        except OSError as e:
            raise TranslationIOError(locale_dir, e) from e

        groups = []
        for file_path in files:
            base_name, file_extension = os.path.splitext(os.path.basename(file_path))
            if file_extension != extension or is_hidden(base_name):
                continue
            groups.append(base_name)
        logger.debug(f"Found {len(groups)} translation groups in {locale_dir}")
        return groups

    @staticmethod
    def locale_display_name(locale: str, display_locale: str = "en") -> str:
        """Human readable name of a locale identifier, e.g. ``hu`` -> ``Hungarian``.

        Identifiers Babel does not know are returned unchanged.
        """
        try:
            display_name = Locale.parse(locale.replace('-', '_')).get_display_name(display_locale)
        except (ValueError, UnknownLocaleError):
            return locale
        return display_name or locale
