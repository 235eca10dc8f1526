import logging
import sys

from PyQt6.QtWidgets import (QApplication, QComboBox, QHBoxLayout, QLabel, QMainWindow, QMessageBox, QPushButton,
                             QVBoxLayout, QWidget)

from transeditor.errors import TransEditorError, TranslationWriteError
from transeditor.translation_file_manager import TranslationFileManager
from ui.translation_table_window import TranslationTableWindow
from utils.config import ConfigManager, TransEditorConfig
from utils.logging_setup import get_logger, setup_logging

logger = get_logger("app")


class MainWindow(QMainWindow):
    def __init__(self, manager: TranslationFileManager):
        super().__init__()
        logger.debug("Initializing MainWindow")
        self.manager = manager
        self.setWindowTitle("Translation Editor")

        screen = QApplication.primaryScreen().geometry()
        self.resize(int(screen.width() * 0.8), int(screen.height() * 0.8))

        main_widget = QWidget()
        self.setCentralWidget(main_widget)
        layout = QVBoxLayout(main_widget)

        header_layout = QHBoxLayout()
        title_label = QLabel("Translation Group:")
        title_label.setStyleSheet("font-weight: bold; font-size: 14px;")
        self.group_selector = QComboBox()
        self.group_selector.currentTextChanged.connect(self.load_group)
        reload_btn = QPushButton("Reload")
        reload_btn.clicked.connect(self.refresh_groups)
        self.locales_label = QLabel("")
        header_layout.addWidget(title_label)
        header_layout.addWidget(self.group_selector)
        header_layout.addWidget(reload_btn)
        header_layout.addStretch()
        header_layout.addWidget(self.locales_label)
        layout.addLayout(header_layout)

        self.table_window = TranslationTableWindow()
        self.table_window.save_requested.connect(self.save_group)
        layout.addWidget(self.table_window)

        self.refresh_groups()

    def refresh_groups(self):
        try:
            groups = self.manager.get_available_translation_groups()
            locales = self.manager.get_locales()
        except TransEditorError as e:
            logger.error(f"Failed to scan translation files: {e}")
            QMessageBox.critical(self, "Error", str(e))
            return
        self.locales_label.setText(", ".join(
            f"{self.manager.scanner.locale_display_name(locale)} ({locale})" for locale in locales))
        current = self.group_selector.currentText()
        self.group_selector.blockSignals(True)
        self.group_selector.clear()
        self.group_selector.addItems(groups)
        self.group_selector.blockSignals(False)
        if current in groups:
            self.group_selector.setCurrentText(current)
        self.load_group(self.group_selector.currentText())

    def load_group(self, group):
        if not group:
            return
        try:
            translations = self.manager.read(group)
            audit = self.manager.audit(group)
            locales = self.manager.get_locales()
        except TransEditorError as e:
            logger.error(f"Failed to read translation group {group}: {e}")
            QMessageBox.critical(self, "Error", str(e))
            return
        self.table_window.load_data(group, translations, locales, self.manager.fallback_locale, audit)

    def save_group(self, group, translations):
        try:
            results = self.manager.write(group, translations)
        except TranslationWriteError as e:
            QMessageBox.warning(self, "Partially Saved", e.results.format_status_report())
        except TransEditorError as e:
            QMessageBox.critical(self, "Error", str(e))
        else:
            QMessageBox.information(self, "Saved", results.format_status_report())
        self.load_group(group)


def main():
    setup_logging(logging.DEBUG if "--verbose" in sys.argv else logging.INFO)
    try:
        config = TransEditorConfig.from_config_manager(ConfigManager())
    except TransEditorError as e:
        logger.error(str(e))
        sys.exit(1)
    app = QApplication(sys.argv)
    window = MainWindow(TranslationFileManager(config))
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
