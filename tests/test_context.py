import signal
import threading

import pytest

from pysurvey.term import TerminalContext, enable_raw_mode


class FakeFile:
    def fileno(self):
        return 99


def create_context(monkeypatch, calls):
    """Get a context for the current platform, that does not touch a real terminal."""
    context = TerminalContext(FakeFile(), FakeFile())
    cls = type(context)
    monkeypatch.setattr(cls, "_store_terminal_mode", lambda self: calls.append("store"))
    monkeypatch.setattr(cls, "_set_terminal_mode", lambda self: calls.append("set"))
    monkeypatch.setattr(cls, "_reset_terminal_mode", lambda self: calls.append("reset"))
    return context


def test_platform_class():
    context = TerminalContext(FakeFile(), FakeFile())
    assert isinstance(context, TerminalContext)
    assert type(context) is not TerminalContext
    assert context.fd_in == 99
    assert context.fd_out == 99


def test_context_manager(monkeypatch):
    calls = []
    context = create_context(monkeypatch, calls)
    with context:
        assert calls == ["store", "set"]
        assert not context.restored
    assert calls == ["store", "set", "reset"]
    assert context.restored


def test_restore_is_idempotent(monkeypatch):
    calls = []
    context = create_context(monkeypatch, calls)
    assert context.enable() is context
    context.restore()
    context.restore()
    with context:
        pass
    assert calls.count("reset") == 1


def test_restore_before_enable_does_nothing(monkeypatch):
    calls = []
    context = create_context(monkeypatch, calls)
    context.restore()
    assert calls == []
    assert not context.restored


def test_enter_only_once(monkeypatch):
    calls = []
    context = create_context(monkeypatch, calls)
    with context:
        pass
    with pytest.raises(RuntimeError):
        with context:
            pass


def test_enable_error_propagates(monkeypatch):
    context = TerminalContext(FakeFile(), FakeFile())

    def fail(self):
        raise OSError("not a terminal")

    monkeypatch.setattr(type(context), "_store_terminal_mode", fail)
    with pytest.raises(OSError):
        enable_raw_mode(FakeFile())


def test_restore_from_threads(monkeypatch):
    calls = []
    context = create_context(monkeypatch, calls)
    context.enable()
    threads = [threading.Thread(target=context.restore) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    context.restore()
    assert calls.count("reset") == 1


def test_signal_handlers(monkeypatch):
    calls = []
    seen = []

    def previous(signum, frame):
        seen.append(signum)

    original = signal.signal(signal.SIGTERM, previous)
    try:
        context = create_context(monkeypatch, calls)
        with context:
            handler = signal.getsignal(signal.SIGTERM)
            assert handler != previous
            # The handler restores the terminal, and then calls the previous one
            handler(signal.SIGTERM, None)
            assert calls == ["store", "set", "reset"]
            assert seen == [signal.SIGTERM]
        assert signal.getsignal(signal.SIGTERM) is previous
        assert calls.count("reset") == 1
    finally:
        signal.signal(signal.SIGTERM, original)


def test_signal_without_previous_handler_exits(monkeypatch):
    calls = []
    original = signal.signal(signal.SIGTERM, signal.SIG_DFL)
    try:
        context = create_context(monkeypatch, calls)
        with context:
            handler = signal.getsignal(signal.SIGTERM)
            with pytest.raises(SystemExit):
                handler(signal.SIGTERM, None)
            assert context.restored
    finally:
        signal.signal(signal.SIGTERM, original)


def test_ignored_signal_stays_ignored(monkeypatch):
    calls = []
    original = signal.signal(signal.SIGTERM, signal.SIG_IGN)
    try:
        context = create_context(monkeypatch, calls)
        with context:
            signal.getsignal(signal.SIGTERM)(signal.SIGTERM, None)
            assert not context.restored
    finally:
        signal.signal(signal.SIGTERM, original)


if __name__ == "__main__":
    print("Run these tests with pytest, they need its monkeypatch fixture.")
