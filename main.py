import sys
import argparse

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import Qt
from PySide6.QtGui import QPalette, QColor

from tictactoe_sync.config import load_settings, setup_logging
from tictactoe_sync.remote import RemoteClient
from tictactoe_sync.ui.main_window import TicTacToeWindow

# -----------------------------------------------------------------------------
# COLOR CONSTANTS
# -----------------------------------------------------------------------------

WINDOW_COLOR = QColor(53, 53, 53)
WINDOW_TEXT_COLOR = Qt.white
BASE_COLOR = QColor(35, 35, 35)
BUTTON_COLOR = QColor(66, 66, 66)
BUTTON_TEXT_COLOR = Qt.white
HIGHLIGHT_COLOR = QColor(42, 130, 218)
DISABLED_TEXT_COLOR = QColor(127, 127, 127)

# -----------------------------------------------------------------------------
# PALETTE SETUP
# -----------------------------------------------------------------------------

def apply_default_palette(app: QApplication):
    """
    Apply the dark theme palette.
    """
    palette = QPalette()
    palette.setColor(QPalette.Window, WINDOW_COLOR)
    palette.setColor(QPalette.WindowText, WINDOW_TEXT_COLOR)
    palette.setColor(QPalette.Base, BASE_COLOR)
    palette.setColor(QPalette.Button, BUTTON_COLOR)
    palette.setColor(QPalette.ButtonText, BUTTON_TEXT_COLOR)
    palette.setColor(QPalette.Highlight, HIGHLIGHT_COLOR)
    palette.setColor(QPalette.Disabled, QPalette.ButtonText, DISABLED_TEXT_COLOR)
    app.setPalette(palette)

# -----------------------------------------------------------------------------
# ENTRY POINT
# -----------------------------------------------------------------------------

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tic Tac Toe with an optional backend")
    parser.add_argument("--backend-url", help="override TICTACTOE_BACKEND_URL")
    parser.add_argument("--offline", action="store_true", help="never contact the backend")
    return parser.parse_known_args(argv)


def main(argv=None):
    args, qt_args = parse_args(argv)
    settings = load_settings()
    setup_logging(settings)

    client = None
    if not args.offline:
        client = RemoteClient(args.backend_url or settings.backend_url, timeout=settings.timeout)

    app = QApplication([sys.argv[0]] + qt_args)
    app.setStyle('Fusion')
    apply_default_palette(app)

    window = TicTacToeWindow(client)
    window.show()
    window.start()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
