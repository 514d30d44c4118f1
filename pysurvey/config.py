"""
The description of a prompt: its label, default, options, theme and key bindings.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .term import ansi


NO_DEFAULT_PLACEHOLDER = "press enter for default"


@dataclass(frozen=True)
class SelectOption:
    """An option of a select or multi-select prompt."""

    label: str
    value: str = ""
    description: str = ""

    @property
    def answer(self):
        """The value reported when this option is chosen."""
        return self.value or self.label


@dataclass(frozen=True)
class Theme:
    """How a prompt looks.

    The styles are functions that transform a piece of text (e.g. by
    wrapping it in escape codes). A style that is None leaves text as is.
    """

    prefix: str = "? "
    hint: str = ""
    error: str = "! "
    prefix_style: Optional[Callable] = None
    label_style: Optional[Callable] = None
    hint_style: Optional[Callable] = None
    default_style: Optional[Callable] = None
    error_style: Optional[Callable] = None
    placeholder_style: Optional[Callable] = None
    suggestion_style: Optional[Callable] = None
    button_active_style: Optional[Callable] = None
    button_inactive_style: Optional[Callable] = None

    def style(self, name, text):
        func = getattr(self, name + "_style")
        return func(text) if func is not None else text


DEFAULT_THEME = Theme()

COLORFUL_THEME = Theme(
    prefix_style=ansi.cyan,
    label_style=ansi.bold,
    hint_style=ansi.dim,
    default_style=ansi.green,
    error_style=ansi.red,
    placeholder_style=ansi.dim,
    suggestion_style=ansi.dim,
    button_active_style=ansi.reverse,
    button_inactive_style=ansi.dim,
)


# %% Key bindings


@dataclass(frozen=True)
class Command:
    """A key that can be bound: escape, tab, enter, or a function key."""

    kind: str
    function_key: int = 0

    def __post_init__(self):
        if self.kind not in ("escape", "tab", "enter", "function"):
            raise ValueError(f"Invalid command kind: {self.kind!r}")
        if (self.kind == "function") != (1 <= self.function_key <= 12):
            raise ValueError("Function commands need a key number from 1 to 12.")

    @classmethod
    def function(cls, n):
        return cls("function", n)

    @classmethod
    def from_key(cls, key):
        """Get the command for the given Key, or None."""
        if key.name in ("escape", "tab", "enter"):
            return cls(key.name)
        elif key.function_number:
            return cls.function(key.function_number)
        return None

    @property
    def label(self):
        """The label shown in the hint line."""
        if self.kind == "function":
            return f"F{self.function_key}"
        return {"escape": "ESC", "tab": "Tab", "enter": "Enter"}[self.kind]


ESCAPE = Command("escape")
TAB = Command("tab")
ENTER = Command("enter")


@dataclass(frozen=True)
class KeyState:
    """The state of a prompt when a bound key is pressed."""

    command: Command
    input: str = ""
    default: str = ""
    suggestion: str = ""


@dataclass(frozen=True)
class CommandContext:
    """What a key binding handler gets. Use ``set_input`` to replace the input text."""

    state: KeyState
    set_input: Callable


@dataclass(frozen=True)
class Action:
    """The result of a key binding handler.

    When ``exit`` is set, the prompt is aborted, and ``error`` (if given)
    is raised to the caller.
    """

    handled: bool = False
    exit: bool = False
    error: Optional[Exception] = None


@dataclass(frozen=True)
class KeyBinding:
    command: Command
    description: str = ""
    handler: Optional[Callable] = None  # (CommandContext) -> Action
    active: Optional[Callable] = None  # (KeyState) -> bool

    def is_active(self, state):
        return self.active is None or bool(self.active(state))


# %% The request


@dataclass(frozen=True)
class PromptRequest:
    """Everything a prompter needs to know to ask a question.

    A request with ``confirm`` set is a yes/no question. A request with
    options is a select, or a multi-select if ``multi_select`` is set.
    Otherwise it's a text prompt.

    The ``validate`` function gets the answer and raises ``ValueError``
    to reject it; the error message is shown to the user.

    With ``allow_back`` set, the answer "back" is returned as typed, without
    validation or option matching, so that a survey can undo.
    """

    label: str = ""
    default: str = ""
    options: Sequence[SelectOption] = ()
    multi_select: bool = False
    confirm: bool = False
    continue_text: str = ""
    validate: Optional[Callable] = None
    theme: Theme = DEFAULT_THEME
    key_map: Sequence[KeyBinding] = field(default_factory=tuple)
    no_default_placeholder: str = ""
    command_handler: Optional[Callable] = None  # (CommandContext) -> Action
    allow_back: bool = False

    @property
    def kind(self):
        if self.confirm:
            return "confirm"
        elif self.options and self.multi_select:
            return "multi_select"
        elif self.options:
            return "select"
        return "text"

    def binding_for(self, command):
        """Get the first binding for the given command, or None."""
        for binding in self.key_map:
            if binding.command == command:
                return binding
        return None

    def check(self, value):
        """Run the validator. Returns the error message, or None if the value is ok."""
        if self.validate is None:
            return None
        try:
            self.validate(value)
        except ValueError as err:
            return str(err) or "invalid value"
        return None

    def is_back(self, text):
        return self.allow_back and text.strip().lower() == "back"


def suggestion_text(default, current_input):
    """The part of the default that would complete the current input."""
    if default and default.startswith(current_input):
        return default[len(current_input) :]
    return ""


def placeholder_text(request):
    return request.default or request.no_default_placeholder


def dispatch_command(request, state, set_input):
    """Let the request's key bindings handle a command.

    Returns the ``Action``. An action that is neither handled nor exit
    means that the prompt should do its default thing.
    """
    binding = request.binding_for(state.command)
    context = CommandContext(state, set_input)
    if binding is not None:
        if not binding.is_active(state):
            return Action(handled=True)
        if binding.handler is not None:
            action = binding.handler(context) or Action()
            if action.exit or action.handled:
                return action
    if request.command_handler is not None:
        return request.command_handler(context) or Action()
    return Action()


def render_hint_line(request, state):
    """Render the key bindings, e.g. "[ Tab ] Autocomplete    [ Enter ] Submit"."""
    theme = request.theme
    hints = []
    for binding in request.key_map:
        if not binding.description:
            continue
        text = f"[ {binding.command.label} ] {binding.description}"
        sub_state = KeyState(
            binding.command, state.input, state.default, state.suggestion
        )
        if binding.is_active(sub_state):
            hints.append(theme.style("button_active", text))
        else:
            hints.append(theme.style("button_inactive", text))
    if not hints:
        return ""
    return theme.style("hint", "    ".join(hints))


# %% Interpreting answers


def default_is_no(default):
    return default.strip().lower() in ("n", "no")


def confirm_answer(text, default):
    """Interpret the answer to a yes/no question.

    Returns "y" or "n", the text itself when it is "back" (so that a survey
    can go back), or None if the text is not an answer.
    """
    answer = text.strip()
    lowered = answer.lower()
    if not answer:
        return "n" if default_is_no(default) else "y"
    elif lowered in ("y", "yes"):
        return "y"
    elif lowered in ("n", "no"):
        return "n"
    elif lowered == "back":
        return answer
    return None


def parse_index(text, count):
    """Parse a 1-based index. Returns the 0-based index, or -1."""
    text = text.strip()
    if not text.isdecimal() or not text.isascii():
        return -1
    index = int(text) - 1
    return index if 0 <= index < count else -1


def parse_indices(text, count):
    """Parse comma and/or space separated 1-based indices into 0-based indices."""
    indices = []
    for part in text.replace(",", " ").split():
        index = parse_index(part, count)
        if index >= 0:
            indices.append(index)
    return indices


def default_selection(options, default):
    """The indices selected by default in a multi-select.

    The default is either a list of 1-based indices, or of values/labels.
    """
    if not default:
        return set()
    indices = parse_indices(default, len(options))
    if indices:
        return set(indices)
    selected = set()
    for value in default.split(","):
        value = value.strip()
        for i, option in enumerate(options):
            if value in (option.value, option.label):
                selected.add(i)
                break
    return selected


def default_index(options, default):
    """The index of the option matching the default, or -1."""
    if default:
        for i, option in enumerate(options):
            if default in (option.value, option.label):
                return i
    return -1


def format_selection(options, selected):
    """Join the answers of the selected options, in option order."""
    return ",".join(option.answer for i, option in enumerate(options) if i in selected)
