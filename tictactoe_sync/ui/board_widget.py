from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import Qt, QSize, Signal, QPointF, QRectF
from PySide6.QtGui import QPainter, QColor, QPen

from ..game_logic import BOARD_SIZE, GameState

X_COLOR = "#8acaff"
O_COLOR = "#ff8a8a"
HIGHLIGHT_COLOR = "#3f5a3f"


class BoardWidget(QWidget):
    """
    custom widget to draw and click on the 3x3 board
    """
    cell_clicked = Signal(int)  # emits flat index 0..8

    def __init__(self, parent=None):
        super().__init__(parent)
        self.state = GameState.initial()
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setMinimumSize(QSize(150, 150))
        self._accept_clicks = True      # toggle click handling

    def set_state(self, state: GameState):
        # new snapshot to draw
        self.state = state
        self.update()

    def set_accept_clicks(self, accept):
        # enable/disable user input
        self._accept_clicks = accept
        self.setCursor(Qt.PointingHandCursor if accept else Qt.ArrowCursor)

    def heightForWidth(self, width):
        # keep square shape
        return width

    def hasHeightForWidth(self):
        return True

    def _geometry(self):
        w, h = self.width(), self.height()
        side = min(w, h)
        return (w - side) / 2, (h - side) / 2, side

    def paintEvent(self, event):
        """
        draw grid, X/O marks, and the winning line
        """
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        ox, oy, side = self._geometry()
        cell_size = side / BOARD_SIZE
        painter.fillRect(self.rect(), QColor("#333"))
        # winning cells first so marks draw on top
        line = self.state.status.line or ()
        for index in line:
            r, c = divmod(index, BOARD_SIZE)
            painter.fillRect(QRectF(ox + c*cell_size, oy + r*cell_size, cell_size, cell_size),
                             QColor(HIGHLIGHT_COLOR))
        # grid lines
        painter.setPen(QPen(QColor("#555"), 2))
        for i in range(1, BOARD_SIZE):
            x = ox + i*cell_size
            painter.drawLine(QPointF(x, oy), QPointF(x, oy + side))
            y = oy + i*cell_size
            painter.drawLine(QPointF(ox, y), QPointF(ox + side, y))
        # marks
        rad = cell_size/2 * 0.6
        for index, sym in enumerate(self.state.squares):
            if not sym: continue
            r, c = divmod(index, BOARD_SIZE)
            cx = ox + c*cell_size + cell_size/2
            cy = oy + r*cell_size + cell_size/2
            if sym == 'X':
                painter.setPen(QPen(QColor(X_COLOR), 4))
                painter.drawLine(QPointF(cx-rad, cy-rad), QPointF(cx+rad, cy+rad))
                painter.drawLine(QPointF(cx+rad, cy-rad), QPointF(cx-rad, cy+rad))
            else:
                painter.setPen(QPen(QColor(O_COLOR), 4))
                painter.drawEllipse(QPointF(cx, cy), rad, rad)
        painter.end()

    def mouseReleaseEvent(self, event):
        """
        map click to a cell index and emit
        """
        if not self._accept_clicks:
            return
        ox, oy, side = self._geometry()
        x, y = event.position().x(), event.position().y()
        # only inside grid
        if not (ox <= x < ox+side and oy <= y < oy+side):
            return
        cell = side / BOARD_SIZE
        if cell <= 0: return
        col = min(int((x-ox)//cell), BOARD_SIZE-1)
        row = min(int((y-oy)//cell), BOARD_SIZE-1)
        self.cell_clicked.emit(row*BOARD_SIZE + col)  # notify main window
