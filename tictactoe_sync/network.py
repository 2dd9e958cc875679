import logging

from PySide6.QtCore import QObject, QThread, Qt, Signal, Slot

from .remote import RequestFailed

logger = logging.getLogger(__name__)


class RequestWorker(QObject):
    """
    qt worker that runs one blocking remote call off the gui thread
    """
    succeeded = Signal(object)   # BoardState from the backend
    failed = Signal(str)         # flattened error text
    finished = Signal()

    def __init__(self, call, *args):
        """
        call: a RemoteClient method, args: its arguments
        """
        super().__init__()
        self.call = call
        self.args = args

    @Slot()
    def run(self):
        # report exactly one of succeeded/failed, then finished
        try:
            result = self.call(*self.args)
        except RequestFailed as e:
            self.failed.emit(str(e))
        except Exception as e:
            logger.exception("unexpected error in request worker")
            self.failed.emit(f"request failed: {e}")
        else:
            self.succeeded.emit(result)
        finally:
            self.finished.emit()


class RequestRunner(QObject):
    """
    runs one request at a time; busy until its reply has been delivered
    """
    def __init__(self, parent=None):
        super().__init__(parent)
        self.worker = None
        self._callbacks = None
        self._threads = []      # (thread, worker), reaped once the thread stopped

    def is_busy(self):
        return self.worker is not None

    def start(self, call, *args, on_success, on_failure):
        """
        spawn thread, wire signals, run call
        returns False (and does nothing) while a reply is still outstanding
        """
        if self.is_busy():
            logger.debug("request already in flight, ignoring")
            return False
        self._reap()
        thread = QThread(self)
        self.worker = RequestWorker(call, *args)
        self._callbacks = (on_success, on_failure)
        self.worker.moveToThread(thread)
        # replies are queued onto this (gui) thread
        self.worker.succeeded.connect(self._on_succeeded)
        self.worker.failed.connect(self._on_failed)
        thread.started.connect(self.worker.run)
        self.worker.finished.connect(thread.quit, Qt.DirectConnection)
        self._threads.append((thread, self.worker))
        thread.start()
        return True

    def _take_callbacks(self):
        # the request is over once its reply is here; the worker itself
        # stays referenced in _threads until its thread has stopped
        callbacks = self._callbacks
        self.worker = None; self._callbacks = None
        return callbacks

    @Slot(object)
    def _on_succeeded(self, result):
        on_success, _ = self._take_callbacks()
        on_success(result)

    @Slot(str)
    def _on_failed(self, err):
        _, on_failure = self._take_callbacks()
        on_failure(err)

    def _reap(self):
        # drop threads that have fully stopped
        alive = []
        for thread, worker in self._threads:
            if thread.isFinished():
                thread.deleteLater()
            else:
                alive.append((thread, worker))
        self._threads = alive

    def stop(self, timeout_ms=1000):
        """
        wait briefly for outstanding threads, used on close
        """
        for thread, _ in self._threads:
            thread.quit()
            if not thread.wait(timeout_ms):
                logger.warning("request thread still running at shutdown")
        self._reap()
