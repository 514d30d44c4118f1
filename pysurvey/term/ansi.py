"""
The vt100 escape sequences that we write, and some text styles.
"""

CLEAR_LINE = "\r\x1b[K"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def cursor_up(n):
    return f"\x1b[{n}A" if n > 0 else ""


def cursor_down(n):
    return f"\x1b[{n}B" if n > 0 else ""


def cursor_right(n):
    return f"\x1b[{n}C" if n > 0 else ""


def sgr(*codes):
    """Get a function that wraps text in the given SGR codes (and a reset)."""
    start = "\x1b[" + ";".join(str(c) for c in codes) + "m"

    def style(text):
        return f"{start}{text}\x1b[0m" if text else text

    return style


bold = sgr(1)
dim = sgr(2)
underline = sgr(4)
red = sgr(31)
green = sgr(32)
yellow = sgr(33)
cyan = sgr(36)
reverse = sgr(7)


def display_width(text):
    """The number of runes in the text, ignoring escape sequences."""
    n = 0
    in_escape = False
    for c in text:
        if in_escape:
            if c.isalpha():
                in_escape = False
        elif c == "\x1b":
            in_escape = True
        else:
            n += 1
    return n
