from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List


@dataclass
class TranslationWriteResults:
    """Outcome of writing one translation group to its per-locale files."""
    group: str
    action_timestamp: datetime = field(default_factory=datetime.now)
    updated_locales: List[str] = field(default_factory=list)
    skipped_locales: List[str] = field(default_factory=list)
    ignored_locales: List[str] = field(default_factory=list)
    failed_locales: List[str] = field(default_factory=list)
    locale_errors: Dict[str, str] = field(default_factory=dict)

    @property
    def action_successful(self) -> bool:
        return not self.failed_locales

    def add_updated(self, locale: str):
        self.updated_locales.append(locale)

    def add_failure(self, locale: str, error: Exception):
        self.failed_locales.append(locale)
        self.locale_errors[locale] = str(error)

    def format_status_report(self) -> str:
        """Generate a human-readable status report."""
        lines = [
            f"Translation Group: {self.group}",
            f"Written at {self.action_timestamp}",
            f"Status: {'Success' if self.action_successful else 'Failed'}",
        ]
        if self.updated_locales:
            lines.append(f"- Updated: {', '.join(self.updated_locales)}")
        if self.skipped_locales:
            lines.append(f"- Untouched: {', '.join(self.skipped_locales)}")
        if self.ignored_locales:
            lines.append(f"- Ignored (unknown locale): {', '.join(self.ignored_locales)}")
        for locale in self.failed_locales:
            lines.append(f"- Failed {locale}: {self.locale_errors.get(locale, '')}")
        return "\n".join(lines)
