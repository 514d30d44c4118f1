import sys
import signal
import logging
import threading


logger = logging.getLogger("pysurvey")


class TerminalContext:
    """Base class for putting a terminal in raw mode.

    Instantiating this class produces a class corresponding with the
    current platform. Use it as a context manager, or call ``enable()``
    and ``restore()`` yourself. Restoring is idempotent, so it is safe to
    call it from both an interrupt and the normal flow.

    Ctrl-C does not produce SIGINT in raw mode, but a signal can still be
    sent by other means (e.g. ``kill``). While the terminal is raw, and when
    running in the main thread, SIGINT and SIGTERM first restore the
    terminal and are then passed on to the previous handler.
    """

    def __new__(cls, *args, **kwargs):
        # Select terminal class
        if sys.platform.startswith("win"):
            from ._context_windows import WindowsTerminalContext as TerminalContext
        else:
            from ._context_unix import UnixTerminalContext as TerminalContext
        return super().__new__(TerminalContext)

    def __init__(self, stdin=None, stdout=None):
        self._entered = False
        self._restored = False
        self._lock = threading.RLock()
        self._previous_handlers = {}

        stdin = stdin or sys.__stdin__
        stdout = stdout or sys.__stdout__
        self.fd_in = stdin.fileno()
        self.fd_out = stdout.fileno()

    def __enter__(self):
        if self._entered:
            raise RuntimeError("Can only enter the context state once.")
        self._entered = True
        self._store_terminal_mode()
        self._set_terminal_mode()
        self._install_signal_handlers()
        logger.debug("terminal put in raw mode")
        return self

    def __exit__(self, *args):
        self.restore()

    def enable(self):
        """Put the terminal in raw mode. Returns self."""
        return self.__enter__()

    def restore(self):
        """Restore the terminal to the state it was in before raw mode was enabled."""
        with self._lock:
            if self._restored or not self._entered:
                return
            self._restored = True
        self._uninstall_signal_handlers()
        self._reset_terminal_mode()
        logger.debug("terminal mode restored")

    @property
    def restored(self):
        return self._restored

    # Signals

    def _install_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return  # signal.signal() only works in the main thread
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                self._previous_handlers[signum] = signal.signal(
                    signum, self._on_signal
                )
            except (OSError, ValueError) as err:
                logger.debug(f"could not install handler for {signum}: {err}")

    def _uninstall_signal_handlers(self):
        if threading.current_thread() is not threading.main_thread():
            return
        while self._previous_handlers:
            signum, handler = self._previous_handlers.popitem()
            signal.signal(signum, handler)

    def _on_signal(self, signum, frame):
        previous = self._previous_handlers.get(signum)
        if previous == signal.SIG_IGN:
            return
        self.restore()
        if callable(previous):
            previous(signum, frame)
        else:
            raise SystemExit(1)

    # For subclasses to implement

    def _store_terminal_mode(self):
        raise NotImplementedError()

    def _set_terminal_mode(self):
        raise NotImplementedError()

    def _reset_terminal_mode(self):
        raise NotImplementedError()


def enable_raw_mode(stdin, stdout=None):
    """Put the terminal behind the given input file in raw mode.

    Returns the ``TerminalContext``; call its ``restore()`` method to undo.
    Raises ``OSError`` (or ``termios.error``) if the mode cannot be set.
    """
    context = TerminalContext(stdin, stdout)
    return context.enable()
