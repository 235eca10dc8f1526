import os

import pytest

from conftest import read_json, write_group
from transeditor.errors import (InvalidGroupError, LocaleDirectoryMissingError, MalformedTranslationFileError,
                                TranslationFormatError, TranslationWriteError)
from transeditor.translation_file_manager import TranslationFileManager
from utils.config import TransEditorConfig
from utils.file_system import LocalFileSystem


class TestRead:
    def test_scenario_key_major_view(self, manager):
        assert manager.read("messages") == {
            "greeting": {"en": "Hi", "hu": "Szia", "de": "Hi"},
            "bye": {"en": "Bye", "hu": "Bye", "de": "Bye"},
        }

    def test_locale_major_view(self, manager):
        assert manager.read_by_locale("messages") == {
            "en": {"greeting": "Hi", "bye": "Bye"},
            "hu": {"greeting": "Szia", "bye": "Bye"},
            "de": {"greeting": "Hi", "bye": "Bye"},
        }

    def test_key_order_follows_fallback_file(self, lang_root, manager):
        write_group(lang_root, "en", "ordered", {"z": "1", "a": "2", "m": "3"})
        write_group(lang_root, "hu", "ordered", {"m": "három", "a": "kettő"})
        assert list(manager.read("ordered")) == ["z", "a", "m"]
        assert list(manager.read_by_locale("ordered")["hu"]) == ["z", "a", "m"]

    def test_extra_keys_are_dropped(self, lang_root, manager):
        write_group(lang_root, "hu", "messages", {"greeting": "Szia", "only_hu": "Csak magyar"})
        view = manager.read("messages")
        assert set(view) == {"greeting", "bye"}
        assert "only_hu" not in manager.read_by_locale("messages")["hu"]

    def test_missing_file_falls_back_entirely(self, manager):
        view = manager.read_by_locale("messages")
        assert view["de"] == view["en"]

    def test_empty_string_translation_is_kept(self, lang_root, manager):
        write_group(lang_root, "hu", "messages", {"greeting": "", "bye": "Viszlát"})
        view = manager.read("messages")
        assert view["greeting"]["hu"] == ""
        assert view["bye"]["hu"] == "Viszlát"

    def test_fallback_values_come_from_fallback_file(self, lang_root, manager):
        write_group(lang_root, "hu", "messages", {"greeting": "Szia", "bye": "Viszlát"})
        view = manager.read("messages")
        assert view["greeting"]["en"] == "Hi"
        assert view["bye"]["en"] == "Bye"

    def test_read_does_not_modify_files(self, lang_root, manager):
        before = {p: p.read_bytes() for p in lang_root.rglob("*") if p.is_file()}
        manager.read("messages")
        manager.read_by_locale("messages")
        after = {p: p.read_bytes() for p in lang_root.rglob("*") if p.is_file()}
        assert before == after

    def test_nonexistent_group(self, manager):
        with pytest.raises(InvalidGroupError):
            manager.read("nonexistent")

    def test_group_only_in_other_locale_is_invalid(self, lang_root, manager):
        write_group(lang_root, "hu", "hu_only", {"a": "b"})
        with pytest.raises(InvalidGroupError):
            manager.read("hu_only")

    @pytest.mark.parametrize("group", ["", ".", "..", "../messages", "en/messages", ".hidden", "__init"])
    def test_path_like_group_names_are_invalid(self, manager, group):
        with pytest.raises(InvalidGroupError):
            manager.read(group)

    def test_hidden_group_file_is_not_readable(self, lang_root, manager):
        write_group(lang_root, "en", "__private", {"a": "b"})
        assert "__private" not in manager.get_available_translation_groups()
        with pytest.raises(InvalidGroupError):
            manager.read("__private")
        with pytest.raises(InvalidGroupError):
            manager.write("__private", {"en": {"a": "c"}})
        assert read_json(lang_root / "en" / "__private.json") == {"a": "b"}

    def test_malformed_locale_file_aborts_read(self, lang_root, manager):
        (lang_root / "hu" / "messages.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(MalformedTranslationFileError) as exc:
            manager.read("messages")
        assert exc.value.locale == "hu"
        assert exc.value.group == "messages"

    def test_nested_values_are_malformed(self, lang_root, manager):
        (lang_root / "hu" / "messages.json").write_text('{"greeting": {"nested": "x"}}', encoding="utf-8")
        with pytest.raises(MalformedTranslationFileError):
            manager.read("messages")

    def test_missing_fallback_directory(self, tmp_path):
        write_group(tmp_path, "hu", "messages", {"greeting": "Szia"})
        manager = TranslationFileManager(TransEditorConfig(str(tmp_path), "en"))
        with pytest.raises(LocaleDirectoryMissingError):
            manager.read("messages")


class TestWrite:
    def test_scenario_write_single_locale(self, lang_root, manager):
        en_before = (lang_root / "en" / "messages.json").read_bytes()

        results = manager.write("messages", {"hu": {"greeting": "Szia", "bye": "Viszlát"}})

        assert read_json(lang_root / "hu" / "messages.json") == {"greeting": "Szia", "bye": "Viszlát"}
        assert (lang_root / "en" / "messages.json").read_bytes() == en_before
        assert not (lang_root / "de" / "messages.json").exists()
        assert results.updated_locales == ["hu"]
        assert set(results.skipped_locales) == {"en", "de"}
        assert results.action_successful

    def test_write_creates_missing_locale_file(self, lang_root, manager):
        manager.write("messages", {"de": {"greeting": "Hallo", "bye": "Tschüss"}})
        assert read_json(lang_root / "de" / "messages.json") == {"greeting": "Hallo", "bye": "Tschüss"}

    def test_unknown_locales_are_ignored(self, lang_root, manager):
        results = manager.write("messages", {"fr": {"greeting": "Salut"}})
        assert results.ignored_locales == ["fr"]
        assert not (lang_root / "fr").exists()

    def test_round_trip_is_idempotent(self, lang_root, manager):
        first = manager.read_by_locale("messages")
        manager.write("messages", first)
        assert manager.read_by_locale("messages") == first
        assert manager.read("messages") == {
            "greeting": {"en": "Hi", "hu": "Szia", "de": "Hi"},
            "bye": {"en": "Bye", "hu": "Bye", "de": "Bye"},
        }

    def test_write_by_key(self, lang_root, manager):
        manager.write_by_key("messages", {
            "greeting": {"hu": "Szervusz", "de": "Hallo"},
            "bye": {"hu": "Viszlát", "de": "Tschüss"},
        })
        assert read_json(lang_root / "hu" / "messages.json") == {"greeting": "Szervusz", "bye": "Viszlát"}
        assert read_json(lang_root / "de" / "messages.json") == {"greeting": "Hallo", "bye": "Tschüss"}

    def test_write_by_key_rejects_non_mapping_values(self, lang_root, manager):
        before = {p: p.read_bytes() for p in lang_root.rglob("*") if p.is_file()}
        with pytest.raises(TranslationFormatError):
            manager.write_by_key("messages", {"greeting": "Hi"})
        after = {p: p.read_bytes() for p in lang_root.rglob("*") if p.is_file()}
        assert before == after

    def test_tricky_values_round_trip(self, lang_root, manager):
        entries = {
            "greeting": "He said \"hi\" and 'bye'",
            "bye": "line one\nline two\ttabbed",
            "code": "<?php return ['x' => $y]; ?>",
            "empty": "",
        }
        manager.write("messages", {"hu": entries})
        view = manager.read_by_locale("messages")
        assert view["hu"]["greeting"] == entries["greeting"]
        assert view["hu"]["bye"] == entries["bye"]
        assert read_json(lang_root / "hu" / "messages.json") == entries

    def test_failure_continues_with_other_locales(self, lang_root, manager):
        class FailingFileSystem(LocalFileSystem):
            def write_text(self, path, content):
                if os.sep + "hu" + os.sep in path:
                    raise PermissionError(13, "Permission denied", path)
                super().write_text(path, content)

        manager = TranslationFileManager(manager.config, file_system=FailingFileSystem())
        with pytest.raises(TranslationWriteError) as exc:
            manager.write("messages", {
                "hu": {"greeting": "Szia", "bye": "Viszlát"},
                "de": {"greeting": "Hallo", "bye": "Tschüss"},
            })

        results = exc.value.results
        assert results.failed_locales == ["hu"]
        assert results.updated_locales == ["de"]
        assert "Permission denied" in results.locale_errors["hu"]
        assert read_json(lang_root / "de" / "messages.json") == {"greeting": "Hallo", "bye": "Tschüss"}
        assert read_json(lang_root / "hu" / "messages.json") == {"greeting": "Szia"}

    def test_non_string_values_fail_the_locale(self, lang_root, manager):
        with pytest.raises(TranslationWriteError) as exc:
            manager.write("messages", {"hu": {"greeting": 5}, "de": {"greeting": "Hallo"}})
        assert exc.value.results.failed_locales == ["hu"]
        assert exc.value.results.updated_locales == ["de"]

    @pytest.mark.parametrize("separator", ["\u2028", "\x85"])
    def test_unrepresentable_po_value_fails_the_locale(self, lang_root, separator):
        write_group(lang_root, "en", "messages", {"greeting": "Hi"}, file_format="po")
        manager = TranslationFileManager(TransEditorConfig(str(lang_root), "en", "po"))
        with pytest.raises(TranslationWriteError) as exc:
            manager.write("messages", {
                "hu": {"greeting": f"Szia{separator}mindenki"},
                "de": {"greeting": "Hallo"},
            })
        assert exc.value.results.failed_locales == ["hu"]
        assert exc.value.results.updated_locales == ["de"]
        assert not (lang_root / "hu" / "messages.po").exists()

    def test_no_temporary_files_left_behind(self, lang_root, manager):
        manager.write("messages", {"hu": {"greeting": "Szia"}, "de": {"greeting": "Hallo"}})
        leftovers = [p.name for p in lang_root.rglob(".tmp-*")]
        assert leftovers == []


class TestAudit:
    def test_audit_reports_untranslated_and_extra_keys(self, lang_root, manager):
        write_group(lang_root, "hu", "messages", {"greeting": "Szia", "stale": "Régi"})
        audit = manager.audit("messages")
        assert audit.missing_files == ["de"]
        assert audit.untranslated_keys["hu"] == ["bye"]
        assert audit.untranslated_keys["de"] == ["greeting", "bye"]
        assert audit.extra_keys == {"hu": ["stale"]}
        assert audit.is_untranslated("bye", "hu")
        assert not audit.is_untranslated("greeting", "hu")
        assert audit.has_errors

    def test_audit_reports_inconsistent_translations(self, lang_root, manager):
        write_group(lang_root, "en", "format", {
            "count": "{0} of {1} files",
            "paren": "Done (ok)",
            "space": " padded",
            "lines": "a\nb",
        })
        write_group(lang_root, "hu", "format", {
            "count": "{0} fájl {2}",
            "paren": "Kész (ok",
            "space": "padded",
            "lines": "a b",
        })
        write_group(lang_root, "de", "format", {
            "count": "{0} von {1} Dateien",
            "paren": "Fertig (ok)",
            "space": " gepolstert",
            "lines": "a\nb",
        })
        audit = manager.audit("format")
        assert audit.invalid_index_locale_groups == [("count", ["hu"])]
        assert audit.invalid_brace_locale_groups == [("paren", ["hu"])]
        assert audit.invalid_leading_space_locale_groups == [("space", ["hu"])]
        assert audit.invalid_newline_locale_groups == [("lines", ["hu"])]
        assert audit.get_total_errors()["invalid_indices"] == 1

    def test_clean_group(self, lang_root, manager):
        write_group(lang_root, "hu", "messages", {"greeting": "Szia", "bye": "Viszlát"})
        write_group(lang_root, "de", "messages", {"greeting": "Hallo", "bye": "Tschüss"})
        audit = manager.audit("messages")
        assert not audit.has_errors
        assert "No issues found." in audit.format_report()


class TestConvert:
    def test_convert_json_to_yaml(self, lang_root, manager):
        all_results = manager.convert_format("yaml")

        assert set(all_results) == {"messages"}
        results = all_results["messages"]
        assert set(results.updated_locales) == {"en", "hu"}
        assert results.skipped_locales == ["de"]
        assert (lang_root / "en" / "messages.json").exists()

        yaml_manager = TranslationFileManager(TransEditorConfig(str(lang_root), "en", "yaml"))
        assert yaml_manager.read("messages") == manager.read("messages")

    def test_convert_deletes_sources(self, lang_root, manager):
        manager.convert_format("po", delete_source=True)
        assert not (lang_root / "en" / "messages.json").exists()
        assert not (lang_root / "hu" / "messages.json").exists()

        po_manager = TranslationFileManager(TransEditorConfig(str(lang_root), "en", "po"))
        assert po_manager.get_available_translation_groups() == ["messages"]
        assert po_manager.read_by_locale("messages")["hu"] == {"greeting": "Szia", "bye": "Bye"}

    def test_malformed_file_is_reported_per_locale(self, lang_root, manager):
        (lang_root / "hu" / "messages.json").write_text("[]", encoding="utf-8")
        results = manager.convert_format("yaml")["messages"]
        assert results.failed_locales == ["hu"]
        assert results.updated_locales == ["en"]

    def test_failed_delete_reports_source_path(self, lang_root, manager):
        class UndeletableFileSystem(LocalFileSystem):
            def delete(self, path):
                raise PermissionError(13, "Permission denied", path)

        manager = TranslationFileManager(manager.config, file_system=UndeletableFileSystem())
        results = manager.convert_format("yaml", delete_source=True)["messages"]

        source_path = str(lang_root / "hu" / "messages.json")
        assert set(results.failed_locales) == {"en", "hu"}
        assert source_path in results.locale_errors["hu"]
        assert "messages.yml" not in results.locale_errors["hu"]
        assert (lang_root / "hu" / "messages.yml").exists()
