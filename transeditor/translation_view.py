"""Conversions between the two shapes of a reconciled translation view.

locale-major: ``{locale: {key: value}}``
key-major:    ``{key: {locale: value}}``
"""

from typing import Dict, Mapping

from transeditor.errors import TranslationFormatError

LocaleMajorView = Dict[str, Dict[str, str]]
KeyMajorView = Dict[str, Dict[str, str]]


def pivot_by_locale(translations: Mapping[str, Mapping[str, str]]) -> LocaleMajorView:
    """Turn a key-major view into a locale-major view.

    Raises:
        TranslationFormatError: if a key does not map to a ``{locale: value}`` mapping
    """
    by_locale: LocaleMajorView = {}
    for key, values in translations.items():
        if not isinstance(values, Mapping):
            raise TranslationFormatError(
                f"translation key {key!r} must map locales to values, found {type(values).__name__}")
        for locale, value in values.items():
            by_locale.setdefault(locale, {})[key] = value
    return by_locale
