"""
The prompter: asks the question described by a ``PromptRequest``.

A prompter is any object with a ``prompt(request)`` method that returns
the answer as a string. The ``TerminalPrompter`` is the real thing: it
uses the interactive prompts when the input is a terminal, and falls back
to line-based prompts otherwise.
"""

import sys
import logging
import dataclasses

from .config import PromptRequest, SelectOption
from .errors import ConfigurationError
from .fallback import LinePrompter
from .prompt import PROMPT_CLASSES
from .term import ByteReader, enable_raw_mode


logger = logging.getLogger("pysurvey")


class TerminalPrompter:
    """Ask questions on a terminal.

    The input can be a text or binary stream. It is wrapped in a single
    ``ByteReader`` that is used for all questions, so that input that was
    read ahead (e.g. from a pipe) is never lost. Pass None for a stream to
    use the ``sys.stdin`` or ``sys.stdout`` of the moment.
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = sys.stdin if stdin is None else stdin
        self.stdout = sys.stdout if stdout is None else stdout
        self._reader = None

    @property
    def reader(self):
        """The ``ByteReader`` that is used for the input."""
        if self._reader is None and self.stdin is not None:
            if isinstance(self.stdin, ByteReader):
                self._reader = self.stdin
            else:
                self._reader = ByteReader(self.stdin)
        return self._reader

    def prompt(self, request=None, reader=None, **fields):
        """Ask the question and return the answer.

        The question is given as a ``PromptRequest``, or as keyword
        arguments for one (these override the request's fields). Raises
        ``CancelledError`` if the user cancels, and ``EOFError`` if the
        input runs out.
        """
        if request is None:
            request = PromptRequest(**fields)
        elif fields:
            request = dataclasses.replace(request, **fields)

        if self.stdin is None or self.stdout is None:
            raise ConfigurationError("prompter missing IO")
        reader = reader or self.reader

        kind = request.kind
        if reader.isatty():
            try:
                context = enable_raw_mode(reader, self.stdout)
            except Exception as err:
                logger.debug(f"cannot enable raw mode, using line mode: {err}")
            else:
                try:
                    prompt = PROMPT_CLASSES[kind](request, reader, self.stdout)
                    return prompt.run()
                finally:
                    context.restore()

        logger.debug(f"asking {kind} question in line mode")
        return LinePrompter(reader, self.stdout).prompt(request)

    # Convenience methods

    def text(self, label, default="", validate=None, **fields):
        return self.prompt(label=label, default=default, validate=validate, **fields)

    def confirm(self, label, default="", **fields):
        return self.prompt(label=label, default=default, confirm=True, **fields)

    def select(self, label, options, default="", **fields):
        return self.prompt(
            label=label, options=as_options(options), default=default, **fields
        )

    def multi_select(self, label, options, default="", **fields):
        return self.prompt(
            label=label,
            options=as_options(options),
            default=default,
            multi_select=True,
            **fields,
        )


def as_options(options):
    """Turn a list of strings, (label, value) tuples, or options into options."""
    result = []
    for option in options:
        if isinstance(option, SelectOption):
            result.append(option)
        elif isinstance(option, str):
            result.append(SelectOption(option))
        else:
            result.append(SelectOption(*option))
    return tuple(result)
