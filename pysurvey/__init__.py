"""
pysurvey - prompts and branching surveys for the terminal.
"""

from .config import (  # noqa
    Action,
    Command,
    CommandContext,
    KeyBinding,
    KeyState,
    PromptRequest,
    SelectOption,
    Theme,
    DEFAULT_THEME,
    COLORFUL_THEME,
)
from .errors import (  # noqa
    PromptError,
    CancelledError,
    ConfigurationError,
    GoBack,
    ValidationError,
)
from .prompter import TerminalPrompter  # noqa
from .survey import (  # noqa
    Survey,
    Question,
    Branch,
    PushQuestion,
    Handler,
    End,
    push_question,
    handler,
    end,
)
from ._main import main  # noqa
from ._cli import cli  # noqa

__version__ = "0.1.0"
version_info = tuple(map(int, __version__.split(".")))
