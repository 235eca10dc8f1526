import os
from typing import Dict, Mapping, Optional

from transeditor.errors import (InvalidGroupError, LocaleDirectoryMissingError, MalformedTranslationFileError,
                                TranslationFormatError, TranslationIOError, TranslationWriteError)
from transeditor.locale_directory_scanner import LocaleDirectoryScanner, is_hidden
from transeditor.translation_audit import GroupAudit, audit_group
from transeditor.translation_file_format import TranslationFileFormat
from transeditor.translation_view import KeyMajorView, LocaleMajorView, pivot_by_locale
from transeditor.translation_write_results import TranslationWriteResults
from utils.config import TransEditorConfig
from utils.file_system import LocalFileSystem
from utils.logging_setup import get_logger

logger = get_logger("translation_file_manager")


class TranslationFileManager:
    """Reads and writes translation groups stored as one file per locale.

    The fallback locale is authoritative for a group:

    1. Key set:
       - The keys of the fallback locale's file are exactly the keys of every view
       - Keys found only in other locales are dropped on read

    2. Values:
       - A locale's own value is used when its file exists and has the key
       - Otherwise the fallback value is used, key by key

    3. Writing:
       - Each locale present in the edited view gets its file fully rewritten
       - Locales absent from the view are left untouched
       - Failures are collected per locale and raised after all locales were attempted

    Only one process is expected to edit a tree at a time; no locking is done.
    """

    def __init__(self, config: TransEditorConfig, file_system=None, scanner: Optional[LocaleDirectoryScanner] = None):
        self.config = config
        self.file_system = file_system or LocalFileSystem()
        self.scanner = scanner or LocaleDirectoryScanner(self.file_system)
        self.file_format = TranslationFileFormat.get(config.file_format)
        logger.debug(f"Initialized TranslationFileManager for {config.language_file_path} "
                     f"(fallback: {config.fallback_locale}, format: {config.file_format})")

    @property
    def fallback_locale(self) -> str:
        return self.config.fallback_locale

    @property
    def locales_directory(self) -> str:
        return self.config.language_file_path

    def get_locales(self) -> list[str]:
        """Get the list of available locales."""
        return self.scanner.list_locales(self.locales_directory)

    def get_available_translation_groups(self) -> list[str]:
        """Get the list of translation groups present in the fallback locale directory."""
        return self.scanner.list_groups(self.locales_directory, self.fallback_locale, self.file_format.extension)

    def get_translation_group_file_path(self, group: str, locale: str, file_format=None) -> str:
        file_format = file_format or self.file_format
        return os.path.join(self.locales_directory, locale, group + file_format.extension)

    def read(self, group: str) -> KeyMajorView:
        """Read a translation group grouped by translation key.

        Returns:
            dict: ``{key: {locale: value}}`` covering every fallback key and every locale
        """
        locales, fallback, entries_by_locale = self._load_group(group)
        translations = {}
        for key, fallback_value in fallback.items():
            translations[key] = {
                locale: entries_by_locale[locale].get(key, fallback_value)
                for locale in locales
            }
        return translations

    def read_by_locale(self, group: str) -> LocaleMajorView:
        """Read a translation group grouped by locale.

        Returns:
            dict: ``{locale: {key: value}}`` covering every locale and every fallback key
        """
        locales, fallback, entries_by_locale = self._load_group(group)
        return {
            locale: {key: entries_by_locale[locale].get(key, fallback_value)
                     for key, fallback_value in fallback.items()}
            for locale in locales
        }

    def audit(self, group: str) -> GroupAudit:
        """Report untranslated keys, dropped keys and inconsistent translations of a group."""
        locales, fallback, entries_by_locale = self._load_group(group)
        missing_files = [locale for locale in locales
                         if locale != self.fallback_locale
                         and not self.file_system.exists(self.get_translation_group_file_path(group, locale))]
        return audit_group(group, self.fallback_locale, locales, entries_by_locale, missing_files)

    def write(self, group: str, translations: Mapping[str, Mapping[str, str]]) -> TranslationWriteResults:
        """Write the files of a translation group from a locale-major view.

        Args:
            group: Translation group name
            translations: ``{locale: {key: value}}``; locales missing here are not touched

        Returns:
            TranslationWriteResults: per-locale outcome

        Raises:
            TranslationWriteError: after all locales were attempted, if any of them failed
        """
        self._validate_group_name(group)
        locales = self._get_locales_with_fallback()
        results = TranslationWriteResults(group)

        for locale in locales:
            if locale not in translations:
                results.skipped_locales.append(locale)
                continue
            file_path = self.get_translation_group_file_path(group, locale)
            try:
                entries = translations[locale]
                if isinstance(entries, Mapping):
                    entries = dict(entries)
                content = self.file_format.dumps(entries)
                self.file_system.write_text(file_path, content)
            except TranslationFormatError as e:
                logger.error(f"Cannot serialize group {group} for locale {locale}: {e}")
                results.add_failure(locale, e)
            except OSError as e:
                logger.error(f"Failed to write {file_path}: {e}")
                results.add_failure(locale, TranslationIOError(file_path, e))
            else:
                results.add_updated(locale)

        known_locales = set(locales)
        results.ignored_locales = [locale for locale in translations if locale not in known_locales]
        if results.ignored_locales:
            logger.warning(f"Ignoring unknown locales while writing {group}: {results.ignored_locales}")

        logger.info(f"Wrote translation group {group} for locales: {results.updated_locales}")
        if not results.action_successful:
            raise TranslationWriteError(results)
        return results

    def write_by_key(self, group: str, translations: Mapping[str, Mapping[str, str]]) -> TranslationWriteResults:
        """Write a translation group from a key-major view ``{key: {locale: value}}``."""
        return self.write(group, pivot_by_locale(translations))

    def convert_format(self, target_format: str, delete_source: bool = False) -> Dict[str, TranslationWriteResults]:
        """Convert every file of every group to another file format.

        Groups are taken from the fallback locale directory in the current format.
        Each locale file that exists is parsed and written in the target format
        next to the original; the original is deleted afterwards if requested.

        Returns:
            dict: group name -> TranslationWriteResults of that group's files
        """
        target = TranslationFileFormat.get(target_format)
        if target.name == self.file_format.name:
            raise TranslationFormatError(f"Translation files are already in {target.name} format")

        locales = self._get_locales_with_fallback()
        all_results = {}
        for group in self.get_available_translation_groups():
            results = TranslationWriteResults(group)
            for locale in locales:
                source_path = self.get_translation_group_file_path(group, locale)
                if not self.file_system.exists(source_path):
                    results.skipped_locales.append(locale)
                    continue
                target_path = self.get_translation_group_file_path(group, locale, target)
                try:
                    entries = self._load_entries(group, locale)
                    self.file_system.write_text(target_path, target.dumps(entries))
                except (MalformedTranslationFileError, TranslationIOError, TranslationFormatError) as e:
                    logger.error(f"Failed to convert {source_path}: {e}")
                    results.add_failure(locale, e)
                    continue
                except OSError as e:
                    logger.error(f"Failed to write {target_path}: {e}")
                    results.add_failure(locale, TranslationIOError(target_path, e))
                    continue
                if delete_source:
                    try:
                        self.file_system.delete(source_path)
                    except OSError as e:
                        logger.error(f"Converted {source_path} but could not delete it: {e}")
                        results.add_failure(locale, TranslationIOError(source_path, e))
                        continue
                results.add_updated(locale)
            logger.info(f"Converted group {group} to {target.name} for locales: {results.updated_locales}")
            all_results[group] = results
        return all_results

    def _get_locales_with_fallback(self) -> list[str]:
        locales = self.get_locales()
        if self.fallback_locale not in locales:
            raise LocaleDirectoryMissingError(
                os.path.join(self.locales_directory, self.fallback_locale),
                f"Fallback locale {self.fallback_locale!r} has no directory in {self.locales_directory}")
        return locales

    def _validate_group_name(self, group: str):
        if not group or group in ('.', '..') or '/' in group or os.sep in group or is_hidden(group):
            raise InvalidGroupError(group, f"Invalid translation group name: {group!r}")

    def _load_group(self, group: str):
        """Load the fallback entries and the raw entries of every locale for a group.

        Returns:
            tuple: (locales, fallback entries, {locale: raw entries}); a locale
            without a file maps to an empty dict
        """
        self._validate_group_name(group)
        locales = self._get_locales_with_fallback()

        fallback_file = self.get_translation_group_file_path(group, self.fallback_locale)
        if not self.file_system.is_file(fallback_file):
            raise InvalidGroupError(group)

        fallback = self._load_entries(group, self.fallback_locale)
        entries_by_locale = {self.fallback_locale: fallback}
        for locale in locales:
            if locale == self.fallback_locale:
                continue
            if self.file_system.exists(self.get_translation_group_file_path(group, locale)):
                entries_by_locale[locale] = self._load_entries(group, locale)
            else:
                entries_by_locale[locale] = {}

        logger.debug(f"Loaded group {group}: {len(fallback)} keys across {len(locales)} locales")
        return locales, fallback, entries_by_locale

    def _load_entries(self, group: str, locale: str) -> dict[str, str]:
        file_path = self.get_translation_group_file_path(group, locale)
        try:
            content = self.file_system.read_text(file_path)
        except UnicodeDecodeError as e:
            raise MalformedTranslationFileError(locale, group, file_path, f"not valid text: {e}") from e
        except OSError as e:
            raise TranslationIOError(file_path, e) from e
        try:
            return self.file_format.loads(content)
        except TranslationFormatError as e:
            raise MalformedTranslationFileError(locale, group, file_path, str(e)) from e
