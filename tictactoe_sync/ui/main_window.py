from ..game_logic import status_text
from ..reconcile import SessionController
from ..network import RequestRunner
from ..ui.board_widget import BoardWidget

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QMenuBar, QMenu, QSizePolicy
)
from PySide6.QtGui import QAction, QFont
from PySide6.QtCore import Qt, Slot


class TicTacToeWindow(QMainWindow):
    """
    main window: renders the session, routes clicks through the controller
    """
    def __init__(self, client=None):
        """
        client: RemoteClient, or None to play locally only
        """
        super().__init__()
        self.controller = SessionController(client)
        self.board_widget = BoardWidget(parent=self)
        self.requests = RequestRunner(self)
        self._pending_index = None       # cell of the move in flight
        self._setup_ui()
        self._render()

    def _setup_ui(self):
        '''window look + layout'''
        self.setWindowTitle("Tic Tac Toe")
        self.setStyleSheet("""
            QMainWindow { background-color: #222; }
            QMenuBar { background-color: #333; color: #eee; }
            QMenu { background-color: #333; color: #eee; border: 1px solid #555; }
            QMenu::item:selected { background-color: #555; }
            QPushButton { background-color: #444; color: #eee; border: 1px solid #555; padding: 8px 15px; border-radius: 5px; }
            QPushButton:hover { background-color: #555; }
            QPushButton:disabled { color: #777; }
            QLabel { color: #eee; }
        """)
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.main_layout = QVBoxLayout(self.central_widget)

        self._create_menu_bar()            # top menu
        self.main_layout.addWidget(self.board_widget, 1)
        self.board_widget.cell_clicked.connect(self._on_cell_clicked)

        self._create_bottom_controls()     # status + offline + reset
        self.main_layout.addWidget(self.controls_bottom_widget)
        self.resize(360, 440)

    def _create_menu_bar(self):
        '''game menu actions'''
        menu_bar = QMenuBar()
        game_menu = QMenu("Game", self)
        new_action = QAction("New Game", self)
        new_action.triggered.connect(self.reset_game)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        game_menu.addAction(new_action)
        game_menu.addSeparator(); game_menu.addAction(quit_action)
        menu_bar.addMenu(game_menu)
        self.setMenuBar(menu_bar)

    def _create_bottom_controls(self):
        # status label + offline chip + reset button
        self.controls_bottom_widget = QWidget()
        hl = QHBoxLayout(self.controls_bottom_widget)
        self.controls_bottom_widget.setStyleSheet("background: transparent;")
        self.message_label = QLabel("")
        f = QFont(); f.setPointSize(12); self.message_label.setFont(f)
        self.message_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.message_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        self.offline_label = QLabel("offline")
        self.offline_label.setStyleSheet("color: #ff8a8a; font-weight: bold;")
        self.offline_label.setToolTip("backend unreachable, playing locally")
        self.reset_button = QPushButton("Reset")
        self.reset_button.clicked.connect(self.reset_game)
        for w in (self.message_label, self.offline_label, None, self.reset_button):
            if w: hl.addWidget(w)
            else: hl.addStretch(1)

    def _render(self):
        """
        push the current session into the widgets
        """
        session = self.controller.session
        status = session.game.status
        self.board_widget.set_state(session.game)
        self.board_widget.set_accept_clicks(session.accepts_input)
        self.reset_button.setEnabled(not session.pending)
        self.offline_label.setVisible(session.offline)
        if session.pending:
            text, style = "waiting for server...", "color: #aaa;"
        elif status.winner:
            text, style = status_text(status), "color: lime; font-weight: bold;"
        elif status.is_draw:
            text, style = status_text(status), "color: yellow; font-weight: bold;"
        else:
            text, style = status_text(status), "color: #8acaff; font-weight: bold;"
        self.message_label.setStyleSheet(style)
        self.message_label.setText(text)

    def start(self):
        """
        initial backend probe; local play right away when there is no client
        """
        if self.controller.client is None:
            self.controller.mount()
            self._render()
            return
        if not self.requests.start(self.controller.client.fetch_state,
                                   on_success=self._on_remote_state,
                                   on_failure=self._on_mount_failed):
            return
        self.controller.begin_request()
        self._render()

    @Slot(int)
    def _on_cell_clicked(self, index):
        # guard before any mutation or network call
        if not self.controller.can_move(index):
            return
        if not self.controller.is_remote:
            self.controller.local_move(index)
            self._render()
            return
        # replies are queued, so nothing lands before begin_request below
        if not self.requests.start(self.controller.client.submit_move, index,
                                   on_success=self._on_remote_state,
                                   on_failure=self._on_move_failed):
            return
        self.controller.begin_request()
        self._pending_index = index
        self._render()

    @Slot()
    def reset_game(self):
        if self.controller.session.pending:
            return
        if not self.controller.is_remote:
            self.controller.local_reset()
            self._render()
            return
        if not self.requests.start(self.controller.client.reset_game,
                                   on_success=self._on_remote_state,
                                   on_failure=self._on_reset_failed):
            return
        self.controller.begin_request()
        self._render()

    @Slot(object)
    def _on_remote_state(self, remote):
        self._pending_index = None
        self.controller.adopt_remote(remote)
        self._render()

    @Slot(str)
    def _on_mount_failed(self, err):
        self.controller.mount_failed()
        self._render()

    @Slot(str)
    def _on_move_failed(self, err):
        self.controller.move_failed(self._pending_index)
        self._pending_index = None
        self._render()

    @Slot(str)
    def _on_reset_failed(self, err):
        self.controller.reset_failed()
        self._render()

    def closeEvent(self, event):
        # ensure cleanup on close
        self.requests.stop()
        if self.controller.client is not None:
            self.controller.client.close()
        event.accept()
