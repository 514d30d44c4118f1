import tty  # Unix
import termios  # Unix

from ._context import TerminalContext


def patch_lflag(attrs: int) -> int:
    # Ctrl-C arrives as a byte, rather than as SIGINT
    return attrs & ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)


def patch_iflag(attrs: int) -> int:
    return attrs & ~(
        # Disable XON/XOFF flow control on output and input.
        # (Don't capture Ctrl-S and Ctrl-Q.)
        termios.IXON
        | termios.IXOFF
        |
        # Don't translate carriage return into newline on input.
        termios.ICRNL
        | termios.INLCR
        | termios.IGNCR
    )


class UnixTerminalContext(TerminalContext):

    def __init__(self, *args, **kwargs):
        self._ori_term_attr = None
        super().__init__(*args, **kwargs)

    def _store_terminal_mode(self):
        # Errors propagate, so the caller can fall back to line mode
        self._ori_term_attr = termios.tcgetattr(self.fd_in)

    def _set_terminal_mode(self):
        newattr = termios.tcgetattr(self.fd_in)
        newattr[tty.LFLAG] = patch_lflag(newattr[tty.LFLAG])
        newattr[tty.IFLAG] = patch_iflag(newattr[tty.IFLAG])

        # VMIN defines the number of characters read at a time in
        # non-canonical mode. It seems to default to 1 on Linux, but on
        # Solaris and derived operating systems it defaults to 4. (This is
        # because the VMIN slot is the same as the VEOF slot, which
        # defaults to ASCII EOT = Ctrl-D = 4.)
        newattr[tty.CC][termios.VMIN] = 1
        newattr[tty.CC][termios.VTIME] = 0

        termios.tcsetattr(self.fd_in, termios.TCSANOW, newattr)

    def _reset_terminal_mode(self):
        if self._ori_term_attr is not None:
            termios.tcsetattr(self.fd_in, termios.TCSANOW, self._ori_term_attr)
            self._ori_term_attr = None
