from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (QHBoxLayout, QHeaderView, QLabel, QLineEdit, QPushButton, QTableWidget,
                             QTableWidgetItem, QVBoxLayout, QWidget)

from transeditor.translation_audit import GroupAudit
from transeditor.translation_view import pivot_by_locale


class TranslationTableWindow(QWidget):
    """Editable table of one translation group: a row per key, a column per locale."""
    save_requested = pyqtSignal(str, dict)  # group, locale-major view

    def __init__(self, parent=None):
        super().__init__(parent)
        self.group = None
        self.locales = []
        self.fallback_locale = None
        self.untranslated_color = QColor(255, 255, 200)  # Light yellow for values taken from the fallback
        self.setup_ui()

    def setup_ui(self):
        layout = QVBoxLayout(self)

        search_layout = QHBoxLayout()
        search_layout.addWidget(QLabel("Search:"))
        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search translation keys...")
        self.search_box.textChanged.connect(self.filter_table)
        search_layout.addWidget(self.search_box)
        layout.addLayout(search_layout)

        self.table = QTableWidget()
        self.table.setColumnCount(0)  # Will be set when data is loaded
        self.table.setRowCount(0)     # Will be set when data is loaded
        self.table.setHorizontalScrollMode(QTableWidget.ScrollMode.ScrollPerPixel)
        self.table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.table.verticalHeader().setSectionResizeMode(QHeaderView.ResizeMode.ResizeToContents)
        layout.addWidget(self.table)

        button_layout = QHBoxLayout()
        self.save_btn = QPushButton("Save Changes")
        self.save_btn.clicked.connect(self.save_changes)
        self.save_btn.setEnabled(False)
        button_layout.addStretch()
        button_layout.addWidget(self.save_btn)
        layout.addLayout(button_layout)

    def load_data(self, group, translations, locales, fallback_locale, audit: GroupAudit = None):
        """Load a key-major view into the table.

        Args:
            group: Translation group name
            translations: ``{key: {locale: value}}``
            locales: Locale codes, one column each
            fallback_locale: Locale shown first and never highlighted
            audit: Optional audit used to highlight untranslated cells
        """
        self.group = group
        self.fallback_locale = fallback_locale
        self.locales = [fallback_locale] + [locale for locale in locales if locale != fallback_locale]

        self.table.clear()
        self.table.setColumnCount(len(self.locales) + 1)
        self.table.setHorizontalHeaderLabels(["Translation Key"] + self.locales)
        self.table.setRowCount(len(translations))

        for row, (key, values) in enumerate(translations.items()):
            key_item = QTableWidgetItem(key)
            key_item.setFlags(key_item.flags() & ~Qt.ItemFlag.ItemIsEditable)
            self.table.setItem(row, 0, key_item)

            for col, locale in enumerate(self.locales, 1):
                item = QTableWidgetItem(values.get(locale, ""))
                if audit is not None and locale != fallback_locale and audit.is_untranslated(key, locale):
                    item.setBackground(self.untranslated_color)
                self.table.setItem(row, col, item)

        self.table.resizeColumnsToContents()
        self.save_btn.setEnabled(True)
        self.filter_table()

    def filter_table(self):
        search_text = self.search_box.text().lower()
        for row in range(self.table.rowCount()):
            key = self.table.item(row, 0).text().lower()
            self.table.setRowHidden(row, bool(search_text) and search_text not in key)

    def collect_translations(self) -> dict:
        """Read every cell back into a locale-major view, hidden rows included."""
        by_key = {}
        for row in range(self.table.rowCount()):
            key = self.table.item(row, 0).text()
            by_key[key] = {locale: self.table.item(row, col).text()
                           for col, locale in enumerate(self.locales, 1)}
        return pivot_by_locale(by_key)

    def save_changes(self):
        if self.group is None:
            return
        self.save_requested.emit(self.group, self.collect_translations())
