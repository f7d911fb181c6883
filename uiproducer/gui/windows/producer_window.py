# gui/windows/producer_window.py
import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QSize, QTimer
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from ...backend.file_source import FileSnapshot, read_file_snapshot
from ...config import ProducerSettings
from ...core import ProducerResult, ProducerScope, UiState, blocking_fetch
from ..state_bridge import CellSignalBridge

logger = logging.getLogger(__name__)


class ProducerWindow(QMainWindow):
    """Shows a file through a refreshable producer.

    The path field is the producer key: committing a new path cancels the
    running fetch and starts over from a fresh loading state.
    """

    def __init__(self, settings: Optional[ProducerSettings] = None) -> None:
        super().__init__()
        self.producer_settings = settings or ProducerSettings()
        self.scope = ProducerScope(self.producer_settings.merge_policy)
        self._fetch = blocking_fetch(read_file_snapshot, max_workers=self.producer_settings.blocking_workers)
        self._result: Optional[ProducerResult] = None
        self._bridge: Optional[CellSignalBridge] = None

        self.setWindowTitle("uiproducer")
        self.setMinimumSize(QSize(640, 420))
        self._setup_ui()

        # The first launch needs the qasync loop to be running
        QTimer.singleShot(0, self._launch)

    def _setup_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout(central)

        path_row = QHBoxLayout()
        self.path_edit = QLineEdit(str(Path.cwd()))
        self.path_edit.setPlaceholderText("File to load")
        self.path_edit.editingFinished.connect(self._launch)
        path_row.addWidget(QLabel("Path:"))
        path_row.addWidget(self.path_edit)
        layout.addLayout(path_row)

        self.error_label = QLabel()
        self.error_label.setStyleSheet("color: #FF0000;")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)

        self.content_view = QPlainTextEdit()
        self.content_view.setReadOnly(True)
        layout.addWidget(self.content_view)

        button_row = QHBoxLayout()
        self.refresh_btn = QPushButton("Refresh")
        self.dismiss_btn = QPushButton("Dismiss error")
        self.refresh_btn.clicked.connect(self._on_refresh_clicked)
        self.dismiss_btn.clicked.connect(self._on_dismiss_clicked)
        button_row.addStretch()
        button_row.addWidget(self.dismiss_btn)
        button_row.addWidget(self.refresh_btn)
        layout.addLayout(button_row)

        self.setCentralWidget(central)
        self.status_bar = QStatusBar(self)
        self.setStatusBar(self.status_bar)

    def _launch(self) -> None:
        path = Path(self.path_edit.text().strip()).expanduser()
        self._result = self.scope.launch(path, self._fetch, slot="window")
        if self._bridge is None:
            self._bridge = CellSignalBridge(self._result.state, self)
            self._bridge.stateChanged.connect(self.render_state)
        self.render_state(self._result.state.value)

    def _on_refresh_clicked(self) -> None:
        if self._result is not None:
            self._result.on_refresh()

    def _on_dismiss_clicked(self) -> None:
        if self._result is not None:
            self._result.on_clear_error()

    def render_state(self, state: UiState) -> None:
        try:
            if state.initial_load:
                self.status_bar.showMessage("Loading...")
            elif state.loading:
                self.status_bar.showMessage("Refreshing...")
            else:
                self.status_bar.showMessage("Ready")

            self.refresh_btn.setEnabled(not state.loading)
            self.dismiss_btn.setEnabled(state.has_error)

            if state.exception is not None:
                self.error_label.setText(str(state.exception))
                self.error_label.show()
            else:
                self.error_label.hide()

            snapshot = state.data
            if isinstance(snapshot, FileSnapshot):
                header = f"{snapshot.size} bytes, {snapshot.line_count} lines"
                self.content_view.setPlainText(header + "\n\n" + "\n".join(snapshot.preview))
            elif snapshot is None:
                self.content_view.clear()
        except Exception as e:
            logger.error(f"Error updating UI state: {e}", exc_info=True)

    def closeEvent(self, event) -> None:
        if self._bridge is not None:
            self._bridge.dispose()
        self.scope.close()
        self._fetch.shutdown()
        super().closeEvent(event)
