"""Qt signal adapter for observable cells."""

from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from ..core.state_cell import ObservableCell, ReadOnlyCell


class CellSignalBridge(QObject):
    """Re-emits every cell write as ``stateChanged``.

    Cells notify on the writing thread; Qt delivers the signal to receivers
    living in another thread through a queued connection.
    """

    stateChanged = pyqtSignal(object)

    def __init__(self, cell: "ObservableCell | ReadOnlyCell", parent: Optional[QObject] = None):
        super().__init__(parent)
        self._cell = cell
        self._unsubscribe: Optional[Callable[[], None]] = cell.subscribe(self.stateChanged.emit)

    @property
    def value(self):
        return self._cell.value

    def dispose(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
