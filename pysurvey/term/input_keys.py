"""
Decoding of raw input bytes into logical keys.

Keys are read one at a time from a ``ByteReader``. An escape byte is only
combined with the bytes that follow it if those are already available, so
a lonely press of the escape key never blocks while waiting for a sequence
that will not come.
"""

from dataclasses import dataclass


KEY_NAMES = (
    "char",
    "enter",
    "escape",
    "tab",
    "backspace",
    "space",
    "ctrl+c",
    "up",
    "down",
    "left",
    "right",
    "home",
    "end",
    "f1",
    "f2",
    "f3",
    "f4",
    "f5",
    "f6",
    "f7",
    "f8",
    "f9",
    "f10",
    "f11",
    "f12",
    "unknown",
)


@dataclass(frozen=True)
class Key:
    """A single logical key.

    The ``name`` is one of ``KEY_NAMES``. Only keys named "char" carry a
    ``char``, the printable character that was typed.
    """

    name: str
    char: str = ""

    def __post_init__(self):
        if self.name not in KEY_NAMES:
            raise ValueError(f"Invalid key name: {self.name!r}")
        if (self.name == "char") != bool(self.char):
            raise ValueError("Only 'char' keys have a char, and they must.")

    @classmethod
    def rune(cls, char):
        return cls("char", char)

    @property
    def is_printable(self):
        return self.name == "char"

    @property
    def function_number(self):
        """The number of a function key, or 0 for other keys."""
        if self.name[0] == "f" and self.name[1:].isdigit():
            return int(self.name[1:])
        return 0

    def __str__(self):
        return self.char if self.name == "char" else self.name


ENTER = Key("enter")
ESCAPE = Key("escape")
TAB = Key("tab")
BACKSPACE = Key("backspace")
SPACE = Key("space")
CTRL_C = Key("ctrl+c")
UP = Key("up")
DOWN = Key("down")
LEFT = Key("left")
RIGHT = Key("right")
HOME = Key("home")
END = Key("end")
UNKNOWN = Key("unknown")
F_KEYS = {i: Key(f"f{i}") for i in range(1, 13)}


# %% Decoding


def read_key(reader):
    """Read one key from the given ``ByteReader``.

    Blocks until at least one byte is available. Raises ``EOFError`` when
    the stream is exhausted.
    """
    b = reader.read_byte()
    node = KEY_TREE.get(b)

    if node is None:
        return _decode_char(b, reader)
    elif not isinstance(node, dict):
        return node

    # Walk the tree for as long as bytes are immediately available
    path = bytes([b])
    while True:
        b = reader.read_byte(block=False)
        if b is None:
            return node.get("", ESCAPE)
        path += bytes([b])
        child = node.get(b)
        if child is None:
            if path.startswith(b"\x1b[") and not _is_final_byte(b):
                _drain_csi(reader)
            return ESCAPE
        elif not isinstance(child, dict):
            return child
        node = child


def _is_final_byte(b):
    return 0x40 <= b <= 0x7E


def _drain_csi(reader):
    # Swallow the rest of an unknown CSI sequence, up to its final byte
    while True:
        b = reader.read_byte(block=False)
        if b is None or _is_final_byte(b):
            break


def _decode_char(b, reader):
    if 0x20 < b < 0x7F:
        return Key.rune(chr(b))
    elif b < 0xC0:
        # Other control chars, and stray utf-8 continuation bytes
        return UNKNOWN

    # The lead byte of a multi-byte utf-8 character
    if b < 0xE0:
        n = 1
    elif b < 0xF0:
        n = 2
    elif b < 0xF8:
        n = 3
    else:
        return UNKNOWN
    bb = bytes([b])
    for _ in range(n):
        bb += bytes([reader.read_byte()])
    try:
        char = bb.decode("utf-8")
    except UnicodeDecodeError:
        return UNKNOWN
    return Key.rune(char) if char.isprintable() else UNKNOWN


def build_tree(map):
    """Build a tree from a flat map, so it can be traversed while decoding incoming bytes."""
    trunk = {}
    for seq, key in map.items():
        branch = trunk
        while len(seq) > 1:
            b, seq = seq[0], seq[1:]
            new_branch = branch.setdefault(b, {})
            if not isinstance(new_branch, dict):
                branch[b] = new_branch = {"": new_branch}
            branch = new_branch
        if isinstance(branch.get(seq[0]), dict):
            branch[seq[0]][""] = key
        else:
            branch[seq[0]] = key
    assert "" not in trunk  # Sanity check
    return trunk


# %% A flat mapping of byte sequences to keys

KEY_MAP = {
    # Control keys
    b" ": SPACE,
    b"\r": ENTER,
    b"\n": ENTER,
    b"\t": TAB,
    b"\x7f": BACKSPACE,
    b"\x08": BACKSPACE,  # Control-H
    b"\x03": CTRL_C,
    b"\x1b": ESCAPE,
    # Cursor keys
    b"\x1b[A": UP,
    b"\x1b[B": DOWN,
    b"\x1b[C": RIGHT,
    b"\x1b[D": LEFT,
    b"\x1b[H": HOME,
    b"\x1b[F": END,
    # VT100 SS3 function keys
    b"\x1bOP": F_KEYS[1],
    b"\x1bOQ": F_KEYS[2],
    b"\x1bOR": F_KEYS[3],
    b"\x1bOS": F_KEYS[4],
    # Function keys
    b"\x1b[11~": F_KEYS[1],
    b"\x1b[12~": F_KEYS[2],
    b"\x1b[13~": F_KEYS[3],
    b"\x1b[14~": F_KEYS[4],
    b"\x1b[15~": F_KEYS[5],
    b"\x1b[16~": F_KEYS[6],
    b"\x1b[17~": F_KEYS[7],
    b"\x1b[18~": F_KEYS[8],
    b"\x1b[19~": F_KEYS[9],
    b"\x1b[20~": F_KEYS[10],
    b"\x1b[21~": F_KEYS[11],
    b"\x1b[23~": F_KEYS[11],  # Observed in the wild as F11 too, kept as-is
    b"\x1b[24~": F_KEYS[12],
}

# The double-bracket variants carry the xterm numbering, with and without
# the leading "1" that some terminals emit.
_DOUBLE_BRACKET_NUMBERS = {
    b"11": 1,
    b"12": 2,
    b"13": 3,
    b"14": 4,
    b"15": 5,
    b"17": 6,
    b"18": 7,
    b"19": 8,
    b"20": 9,
    b"21": 10,
    b"23": 11,
    b"24": 12,
}

for _digits, _n in _DOUBLE_BRACKET_NUMBERS.items():
    KEY_MAP[b"\x1b[[" + _digits] = F_KEYS[_n]
    KEY_MAP[b"\x1b[1[" + _digits] = F_KEYS[_n]

del _digits, _n


KEY_TREE = build_tree(KEY_MAP)
