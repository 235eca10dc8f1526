import re
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

# Parentheses only need to balance, with the fullwidth close parenthesis accepted.
# Other brackets must match the fallback counts.
BRACE_PAIRS = [
    ('(', (')', '）')),
    ('[', (']',)),
    ('<', ('>',)),
    ('{', ('}',)),
]


@dataclass
class GroupAudit:
    """Findings for one translation group.

    Per-key findings are ``(key, [locales])`` pairs, listing only locales that
    have their own translation of the key.
    """
    group: str
    fallback_locale: str
    missing_files: List[str] = field(default_factory=list)
    untranslated_keys: Dict[str, List[str]] = field(default_factory=dict)
    extra_keys: Dict[str, List[str]] = field(default_factory=dict)
    invalid_index_locale_groups: List[Tuple[str, List[str]]] = field(default_factory=list)
    invalid_brace_locale_groups: List[Tuple[str, List[str]]] = field(default_factory=list)
    invalid_leading_space_locale_groups: List[Tuple[str, List[str]]] = field(default_factory=list)
    invalid_newline_locale_groups: List[Tuple[str, List[str]]] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(self.get_total_errors().values())

    def get_total_errors(self) -> Dict[str, int]:
        """Get a count of all finding types."""
        return {
            'missing_files': len(self.missing_files),
            'untranslated_keys': sum(len(keys) for keys in self.untranslated_keys.values()),
            'extra_keys': sum(len(keys) for keys in self.extra_keys.values()),
            'invalid_indices': sum(len(locales) for _, locales in self.invalid_index_locale_groups),
            'invalid_braces': sum(len(locales) for _, locales in self.invalid_brace_locale_groups),
            'invalid_leading_spaces': sum(len(locales) for _, locales in self.invalid_leading_space_locale_groups),
            'invalid_newlines': sum(len(locales) for _, locales in self.invalid_newline_locale_groups),
        }

    def is_untranslated(self, key: str, locale: str) -> bool:
        return key in self.untranslated_keys.get(locale, [])

    def format_report(self) -> str:
        lines = [f"Translation group: {self.group} (fallback: {self.fallback_locale})"]
        if not self.has_errors:
            lines.append("No issues found.")
            return "\n".join(lines)
        if self.missing_files:
            lines.append(f"Missing files, fully falling back: {', '.join(self.missing_files)}")
        for locale, keys in self.untranslated_keys.items():
            lines.append(f"Untranslated in {locale}: {', '.join(keys)}")
        for locale, keys in self.extra_keys.items():
            lines.append(f"Not in fallback, dropped from {locale}: {', '.join(keys)}")
        for label, key_groups in (("Invalid indices", self.invalid_index_locale_groups),
                                  ("Invalid braces", self.invalid_brace_locale_groups),
                                  ("Invalid leading/trailing spaces", self.invalid_leading_space_locale_groups),
                                  ("Invalid newlines", self.invalid_newline_locale_groups)):
            for key, locales in key_groups:
                lines.append(f"{label}: \"{key}\" in locales: {locales}")
        return "\n".join(lines)


def get_string_format_indices(s):
    indices = []
    for match in re.finditer(r"{[0-9]+}", s):
        match_text = match.group()
        idx = int(match_text[1:-1])
        indices.append(idx)
    indices.sort()
    return tuple(indices)


def _count_braces(s):
    return {open_brace: (s.count(open_brace), sum(s.count(c) for c in close_braces))
            for open_brace, close_braces in BRACE_PAIRS}


def _space_counts(s):
    return len(s) - len(s.lstrip()), len(s) - len(s.rstrip())


def get_invalid_index_locales(fallback_value: str, values: Dict[str, str]) -> List[str]:
    if "{0}" not in fallback_value:
        return []
    fallback_indices = get_string_format_indices(fallback_value)
    return [locale for locale, value in values.items()
            if get_string_format_indices(value) != fallback_indices]


def get_invalid_brace_locales(fallback_value: str, values: Dict[str, str]) -> List[str]:
    fallback_counts = _count_braces(fallback_value)
    invalid_locales = []
    for locale, value in values.items():
        counts = _count_braces(value)
        for open_brace, (open_count, close_count) in counts.items():
            if open_brace == '(':
                invalid = open_count != close_count
            else:
                invalid = (open_count, close_count) != fallback_counts[open_brace]
            if invalid:
                invalid_locales.append(locale)
                break
    return invalid_locales


def get_invalid_leading_space_locales(fallback_value: str, values: Dict[str, str]) -> List[str]:
    fallback_spaces = _space_counts(fallback_value)
    return [locale for locale, value in values.items() if _space_counts(value) != fallback_spaces]


def get_invalid_newline_locales(fallback_value: str, values: Dict[str, str]) -> List[str]:
    def newline_counts(s):
        return s.count('\\n'), s.count('\n')

    fallback_newlines = newline_counts(fallback_value)
    return [locale for locale, value in values.items() if newline_counts(value) != fallback_newlines]


def audit_group(group, fallback_locale, locales, entries_by_locale, missing_files) -> GroupAudit:
    """Audit the raw entries of a group against its fallback entries.

    Args:
        group: Translation group name
        fallback_locale: Fallback locale identifier
        locales: All locales, fallback included
        entries_by_locale: Raw ``{locale: {key: value}}`` read from the files, no substitution
        missing_files: Locales without a file for the group
    """
    fallback = entries_by_locale[fallback_locale]
    audit = GroupAudit(group, fallback_locale, missing_files=list(missing_files))
    other_locales = [locale for locale in locales if locale != fallback_locale]

    for locale in other_locales:
        entries = entries_by_locale.get(locale, {})
        untranslated = [key for key in fallback if key not in entries]
        if untranslated:
            audit.untranslated_keys[locale] = untranslated
        extra = [key for key in entries if key not in fallback]
        if extra:
            audit.extra_keys[locale] = extra

    for key, fallback_value in fallback.items():
        values = {locale: entries_by_locale[locale][key] for locale in other_locales
                  if key in entries_by_locale.get(locale, {})}
        if not values:
            continue
        for checker, key_groups in ((get_invalid_index_locales, audit.invalid_index_locale_groups),
                                    (get_invalid_brace_locales, audit.invalid_brace_locale_groups),
                                    (get_invalid_leading_space_locales, audit.invalid_leading_space_locale_groups),
                                    (get_invalid_newline_locales, audit.invalid_newline_locale_groups)):
            invalid_locales = checker(fallback_value, values)
            if invalid_locales:
                key_groups.append((key, invalid_locales))

    return audit
