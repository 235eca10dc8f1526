"""Serialization of translation group files.

Each locale file of a translation group holds a flat mapping of string keys to
string values. The formats here only ever parse data; file content is never
evaluated as code.

Reading YAML uses PyYAML's ``safe_load``. Writing YAML uses ruamel.yaml so that
every key and value can be emitted double-quoted: PyYAML discards quote style
when dumping, and an unquoted ``yes`` or ``on`` would come back as a boolean.
"""

import io
import json

import polib
import yaml
from ruamel.yaml import YAML as RuamelYAML
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

from transeditor.errors import TranslationFormatError

DEFAULT_FORMAT = "json"


def validate_entries(data) -> dict[str, str]:
    """Check that parsed data is a flat mapping of strings to strings.

    Raises:
        TranslationFormatError: if it is not
    """
    if not isinstance(data, dict):
        raise TranslationFormatError(f"expected a mapping of keys to values, found {type(data).__name__}")
    for key, value in data.items():
        if not isinstance(key, str):
            raise TranslationFormatError(f"translation key {key!r} is not a string")
        if not isinstance(value, str):
            raise TranslationFormatError(f"value of translation key {key!r} is not a string: {value!r}")
    return dict(data)


class TranslationFileFormat:
    """Base class for a translation file format.

    Subclasses register themselves by ``name`` and provide ``loads``/``dumps``.
    """
    name = None
    extension = None
    _formats = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.name:
            TranslationFileFormat._formats[cls.name] = cls

    @classmethod
    def names(cls) -> list[str]:
        return list(TranslationFileFormat._formats.keys())

    @classmethod
    def get(cls, name: str) -> 'TranslationFileFormat':
        try:
            return TranslationFileFormat._formats[name]()
        except KeyError:
            raise TranslationFormatError(
                f"Unknown file format {name!r}, expected one of {cls.names()}") from None

    def loads(self, content: str) -> dict[str, str]:
        raise NotImplementedError

    def dumps(self, entries: dict[str, str]) -> str:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name} *{self.extension}>"


class JsonFileFormat(TranslationFileFormat):
    name = "json"
    extension = ".json"

    def loads(self, content):
        try:
            data = json.loads(content)
        except ValueError as e:
            raise TranslationFormatError(f"invalid JSON: {e}") from e
        return validate_entries(data)

    def dumps(self, entries):
        validate_entries(entries)
        return json.dumps(entries, ensure_ascii=False, indent=4) + "\n"


class YamlFileFormat(TranslationFileFormat):
    name = "yaml"
    extension = ".yml"

    def loads(self, content):
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise TranslationFormatError(f"invalid YAML: {e}") from e
        if data is None:
            return {}
        return validate_entries(data)

    def dumps(self, entries):
        validate_entries(entries)
        ryaml = RuamelYAML()
        ryaml.width = 1000  # Prevent line wrapping
        ryaml.indent(mapping=2, sequence=4, offset=2)
        # Keys are quoted as well so YAML 1.1 readers never resolve them to booleans or numbers
        quoted_data = {
            DoubleQuotedScalarString(key): DoubleQuotedScalarString(value)
            for key, value in entries.items()
        }
        stream = io.StringIO()
        ryaml.dump(quoted_data, stream)
        return stream.getvalue()


class PoFileFormat(TranslationFileFormat):
    """Gettext catalog where each msgid is a translation key and its msgstr the value."""
    name = "po"
    extension = ".po"

    METADATA = {
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
    }

    # str.splitlines() breaks on these and polib has no escape for them
    LINE_BOUNDARIES = ("\x0b", "\x0c", "\x1c", "\x1d", "\x1e", "\x85", "\u2028", "\u2029")

    def loads(self, content):
        try:
            po = polib.pofile(content)
        except (OSError, ValueError) as e:
            raise TranslationFormatError(f"invalid PO catalog: {e}") from e
        entries = {}
        for entry in po:
            if entry.obsolete:
                continue
            if entry.msgid_plural:
                raise TranslationFormatError(f"plural entry {entry.msgid!r} is not supported")
            entries[entry.msgid] = entry.msgstr
        return entries

    def dumps(self, entries):
        validate_entries(entries)
        po = polib.POFile()
        po.metadata = dict(PoFileFormat.METADATA)
        for key, value in entries.items():
            if key == "":
                # An empty msgid is the catalog header
                raise TranslationFormatError("PO catalogs cannot hold an empty translation key")
            for text in (key, value):
                if any(c in text for c in PoFileFormat.LINE_BOUNDARIES):
                    raise TranslationFormatError(
                        f"PO catalogs cannot hold line separator characters, found in {key!r}")
            po.append(polib.POEntry(msgid=key, msgstr=value))
        return str(po) + "\n"
