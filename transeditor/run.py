import argparse
import json
import logging
import sys

from transeditor.errors import TransEditorError, TranslationWriteError
from transeditor.translation_file_format import TranslationFileFormat
from transeditor.translation_file_manager import TranslationFileManager
from utils.config import ConfigManager, TransEditorConfig
from utils.logging_setup import get_logger, setup_logging

logger = get_logger("run")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="transeditor",
        description="Synchronize per-locale translation files against the fallback locale.")
    parser.add_argument("--config-dir", help="Directory holding default_config.json / user_config.json")
    parser.add_argument("--language-file-path", help="Root directory with one subdirectory per locale")
    parser.add_argument("--fallback-locale", help="Locale whose keys and values are authoritative")
    parser.add_argument("--format", dest="file_format", choices=TranslationFileFormat.names(),
                        help="Translation file format")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("locales", help="List available locales")
    subparsers.add_parser("groups", help="List translation groups of the fallback locale")

    show = subparsers.add_parser("show", help="Print the reconciled view of a group as JSON")
    show.add_argument("group")
    show.add_argument("--by-locale", action="store_true", help="Group by locale instead of translation key")

    import_parser = subparsers.add_parser("import", help="Write a group from a JSON view file")
    import_parser.add_argument("group")
    import_parser.add_argument("file", help="JSON file, '-' for stdin")
    import_parser.add_argument("--by-key", action="store_true",
                               help="The file is grouped by translation key instead of locale")

    audit = subparsers.add_parser("audit", help="Report untranslated and inconsistent entries of a group")
    audit.add_argument("group")

    convert = subparsers.add_parser("convert", help="Convert every translation file to another format")
    convert.add_argument("target_format", choices=TranslationFileFormat.names())
    convert.add_argument("--delete-source", action="store_true", help="Remove the original files after converting")
    return parser


class Run:
    def __init__(self, args, out=None):
        self.args = args
        self.out = out or sys.stdout

    def load_config(self) -> TransEditorConfig:
        return TransEditorConfig.from_config_manager(
            ConfigManager(self.args.config_dir),
            language_file_path=self.args.language_file_path,
            fallback_locale=self.args.fallback_locale,
            file_format=self.args.file_format,
        )

    def print(self, text=""):
        print(text, file=self.out)

    def execute(self) -> int:
        try:
            manager = TranslationFileManager(self.load_config())
            return getattr(self, "do_" + self.args.command)(manager)
        except TranslationWriteError as e:
            self.print(e.results.format_status_report())
            logger.error(str(e))
            return 1
        except TransEditorError as e:
            logger.error(str(e))
            return 1

    def do_locales(self, manager):
        for locale in manager.get_locales():
            marker = " (fallback)" if locale == manager.fallback_locale else ""
            display_name = manager.scanner.locale_display_name(locale)
            self.print(f"{locale}\t{display_name}{marker}")
        return 0

    def do_groups(self, manager):
        for group in manager.get_available_translation_groups():
            self.print(group)
        return 0

    def do_show(self, manager):
        if self.args.by_locale:
            translations = manager.read_by_locale(self.args.group)
        else:
            translations = manager.read(self.args.group)
        self.print(json.dumps(translations, ensure_ascii=False, indent=4))
        return 0

    def do_import(self, manager):
        try:
            if self.args.file == "-":
                translations = json.load(sys.stdin)
            else:
                with open(self.args.file, "r", encoding="utf-8") as f:
                    translations = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read view file {self.args.file}: {e}")
            return 1
        if not isinstance(translations, dict):
            logger.error(f"View file {self.args.file} must contain a JSON object")
            return 1

        if self.args.by_key:
            results = manager.write_by_key(self.args.group, translations)
        else:
            results = manager.write(self.args.group, translations)
        self.print(results.format_status_report())
        return 0

    def do_audit(self, manager):
        audit = manager.audit(self.args.group)
        self.print(audit.format_report())
        return 1 if audit.has_errors else 0

    def do_convert(self, manager):
        all_results = manager.convert_format(self.args.target_format, delete_source=self.args.delete_source)
        for results in all_results.values():
            self.print(results.format_status_report())
        return 0 if all(results.action_successful for results in all_results.values()) else 1


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    return Run(args).execute()


if __name__ == "__main__":
    sys.exit(main())
