import json
import os

import pytest

from transeditor.translation_file_format import TranslationFileFormat
from transeditor.translation_file_manager import TranslationFileManager
from utils.config import TransEditorConfig


def write_group(root, locale, group, entries, file_format="json"):
    """Write a group file directly, bypassing the manager."""
    fmt = TranslationFileFormat.get(file_format)
    locale_dir = os.path.join(root, locale)
    os.makedirs(locale_dir, exist_ok=True)
    path = os.path.join(locale_dir, group + fmt.extension)
    with open(path, "w", encoding="utf-8") as f:
        f.write(fmt.dumps(entries))
    return path


def read_json(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def lang_root(tmp_path):
    """Locales en (fallback), hu and de; group ``messages`` exists in en and hu only."""
    root = tmp_path / "lang"
    write_group(root, "en", "messages", {"greeting": "Hi", "bye": "Bye"})
    write_group(root, "hu", "messages", {"greeting": "Szia"})
    (root / "de").mkdir()
    return root


@pytest.fixture
def manager(lang_root):
    return TranslationFileManager(TransEditorConfig(str(lang_root), "en"))
