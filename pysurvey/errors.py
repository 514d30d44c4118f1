"""
The errors raised by prompts and surveys.

Errors reading from or writing to the streams (``OSError``, and
``EOFError`` when the input is exhausted) are not wrapped, but propagate
as they are.
"""


class PromptError(Exception):
    """Base class for errors raised by pysurvey."""


class CancelledError(PromptError):
    """The user cancelled the prompt, with Ctrl-C or an unhandled escape."""

    def __init__(self, message="cancelled"):
        super().__init__(message)


class ConfigurationError(PromptError):
    """The prompter is missing its input or output stream."""


class GoBack(PromptError):
    """Raised by the survey's "Back" key bindings to undo the last answer.

    A ``Survey`` handles this itself; it does not escape ``Survey.run()``.
    """

    def __init__(self, message="go back"):
        super().__init__(message)


class ValidationError(ValueError):
    """Can be raised by validators to reject a value.

    Any ``ValueError`` raised by a validator is treated the same.
    """
