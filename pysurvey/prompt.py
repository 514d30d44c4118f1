"""
Interactive prompts, for a terminal in raw mode.

Each prompt draws a block of lines, and redraws it in place after every
key. To redraw, we move the cursor back up to the first line of the block,
and then clear and rewrite each line.
"""

import logging

from .config import (
    Command,
    KeyState,
    confirm_answer,
    default_index,
    default_is_no,
    default_selection,
    dispatch_command,
    format_selection,
    render_hint_line,
    suggestion_text,
)
from .errors import CancelledError
from .term.ansi import (
    CLEAR_LINE,
    HIDE_CURSOR,
    SHOW_CURSOR,
    cursor_down,
    cursor_right,
    cursor_up,
    display_width,
)
from .term.input_keys import read_key


logger = logging.getLogger("pysurvey")


class BasePrompt:
    """Base class for interactive prompts.

    Subclasses implement ``get_lines()`` and ``on_key()``. The latter
    returns the answer when the prompt is done, and None otherwise.
    """

    def __init__(self, request, reader, file_out):
        self._request = request
        self._theme = request.theme
        self._reader = reader
        self._file_out = file_out

        self._line_count = 0  # number of lines currently drawn
        self._cursor_row = 0  # the row in the block where the cursor is

    def run(self):
        """Run the prompt until it produces an answer."""
        self.render()
        try:
            while True:
                key = read_key(self._reader)
                answer = self.on_key(key)
                if answer is not None:
                    return answer
                self.render()
        finally:
            self._write(SHOW_CURSOR)
            self._flush()

    def _write(self, text):
        self._file_out.write(text)

    def _flush(self):
        self._file_out.flush()

    # Drawing

    def get_lines(self):
        """Get the lines to draw, and the (row, column) of the cursor.

        When the cursor position is None, the cursor is hidden.
        """
        raise NotImplementedError()

    def render(self):
        lines, cursor = self.get_lines()
        write = self._write

        write(HIDE_CURSOR)
        write(cursor_up(self._cursor_row))
        for line in lines:
            write(CLEAR_LINE + line + "\n")

        # Clear lines that were drawn before, but are not needed now
        n_extra = self._line_count - len(lines)
        for _ in range(n_extra):
            write(CLEAR_LINE + cursor_down(1))
        write(cursor_up(n_extra))

        if cursor is None:
            self._cursor_row = len(lines)
        else:
            row, column = cursor
            write(cursor_up(len(lines) - row))
            write("\r" + cursor_right(column))
            write(SHOW_CURSOR)
            self._cursor_row = row
        self._line_count = len(lines)
        self._flush()

    def clear(self):
        """Clear all drawn lines, leaving the cursor at the first of them."""
        write = self._write
        write(cursor_up(self._cursor_row))
        for _ in range(self._line_count):
            write(CLEAR_LINE + "\n")
        write(cursor_up(self._line_count))
        write("\r")
        self._line_count = 0
        self._cursor_row = 0

    def finish(self, line):
        """Replace the prompt with a single line that shows the answer."""
        self.clear()
        self._write(CLEAR_LINE + line + "\n")
        self._flush()

    # Helpers

    def head(self):
        theme = self._theme
        return theme.style("prefix", theme.prefix) + theme.style(
            "label", self._request.label
        )

    def hint(self):
        if self._theme.hint:
            return " " + self._theme.style("hint", self._theme.hint)
        return ""

    def error_line(self, message):
        theme = self._theme
        return theme.style("error", theme.error) + theme.style("error", message)

    def get_input(self):
        return ""

    def set_input(self, text):
        pass

    def get_suggestion(self):
        return ""

    def hint_line(self):
        state = KeyState(
            None, self.get_input(), self._request.default, self.get_suggestion()
        )
        return render_hint_line(self._request, state)

    def dispatch(self, command):
        state = KeyState(
            command, self.get_input(), self._request.default, self.get_suggestion()
        )
        action = dispatch_command(self._request, state, self.set_input)
        logger.debug(f"{command.label} dispatched: {action}")
        return action

    def exit(self, action):
        """Abort the prompt because a key binding asked for it."""
        self.clear()
        self._flush()
        if action.error is not None:
            raise action.error
        return ""

    def cancel(self):
        self.clear()
        self._flush()
        raise CancelledError()

    def on_key(self, key):
        raise NotImplementedError()


class TextPrompt(BasePrompt):
    """A prompt for a line of text, with the default as a suggestion."""

    def __init__(self, request, reader, file_out):
        super().__init__(request, reader, file_out)
        self._in1 = ""  # left of the cursor
        self._in2 = ""  # right of the cursor
        self._error = ""

    def get_input(self):
        return self._in1 + self._in2

    def set_input(self, text):
        self._in1 = text
        self._in2 = ""

    def get_suggestion(self):
        return suggestion_text(self._request.default, self.get_input())

    def input_head(self):
        return self.head() + ": "

    def get_lines(self):
        theme = self._theme
        head = self.input_head()
        suggestion = theme.style("suggestion", self.get_suggestion())
        lines = [head + self._in1 + self._in2 + suggestion]
        if self._error:
            lines.append(self.error_line(self._error))
        hint_line = self.hint_line()
        if hint_line:
            lines.append(hint_line)
        # The cursor goes right after the typed text, not after the suggestion
        return lines, (0, display_width(head + self._in1))

    def on_key(self, key):
        name = key.name
        if name == "ctrl+c":
            self.cancel()

        command = Command.from_key(key)
        if command is not None:
            action = self.dispatch(command)
            if action.exit:
                return self.exit(action)
            elif action.handled:
                return None

        if name == "enter":
            return self.submit()
        elif name == "tab":
            self.complete()
        elif name == "escape":
            self.cancel()
        elif key.is_printable:
            self._in1 += key.char
        elif name == "space":
            self._in1 += " "
        elif name == "backspace":
            self._in1 = self._in1[:-1]
        elif name == "left":
            if self._in1:
                self._in2 = self._in1[-1] + self._in2
                self._in1 = self._in1[:-1]
        elif name == "right":
            if self._in2:
                self._in1 += self._in2[0]
                self._in2 = self._in2[1:]
        elif name == "home":
            self._in1, self._in2 = "", self._in1 + self._in2
        elif name == "end":
            self._in1, self._in2 = self._in1 + self._in2, ""
        else:
            pass  # ignore
        return None

    def complete(self):
        if self._request.default:
            self.set_input(self._request.default)

    def submit(self):
        value = self.get_input() or self._request.default
        if self._request.is_back(self.get_input()):
            error = None
        else:
            error = self._request.check(value)
        if error is not None:
            self._error = error
            self.set_input("")
            return None
        self.finish(self.input_head() + self._theme.style("default", value))
        return value


class ConfirmPrompt(TextPrompt):
    """A yes/no question. The answer is "y" or "n" (or "back")."""

    def input_head(self):
        if default_is_no(self._request.default):
            choices = " (y/N)"
        else:
            choices = " (Y/n)"
        return self.head() + choices + self.hint() + ": "

    def get_suggestion(self):
        return ""

    def complete(self):
        pass

    def submit(self):
        answer = confirm_answer(self.get_input(), self._request.default)
        if answer is None:
            self._error = "please enter 'y' or 'n'"
            self.set_input("")
            return None
        self.finish(self.input_head() + self._theme.style("default", answer))
        return answer


class SelectPrompt(BasePrompt):
    """Select one of the options, using the arrow keys or a digit."""

    def __init__(self, request, reader, file_out):
        super().__init__(request, reader, file_out)
        self._options = request.options
        self._index = max(0, default_index(self._options, request.default))

    def get_lines(self):
        theme = self._theme
        lines = [self.head() + self.hint()]
        for i, option in enumerate(self._options):
            text = option.label
            if option.description:
                text += " - " + option.description
            if i == self._index:
                lines.append("> " + theme.style("default", text))
            else:
                lines.append("  " + text)
        hint_line = self.hint_line()
        if hint_line:
            lines.append(hint_line)
        return lines, None

    def on_key(self, key):
        name = key.name
        n = len(self._options)
        if name == "ctrl+c":
            self.cancel()

        command = Command.from_key(key)
        if command is not None:
            action = self.dispatch(command)
            if action.exit:
                return self.exit(action)
            elif action.handled:
                return None

        if name == "up":
            self._index = (self._index - 1) % n
        elif name == "down":
            self._index = (self._index + 1) % n
        elif name == "home":
            self._index = 0
        elif name == "end":
            self._index = n - 1
        elif name == "enter":
            return self.submit()
        elif name == "escape" or key.function_number:
            self.cancel()
        elif key.is_printable and key.char in "123456789":
            index = int(key.char) - 1
            if index < n:
                self._index = index
                return self.submit()
        return None

    def submit(self):
        option = self._options[self._index]
        self.finish(self.head() + ": " + self._theme.style("default", option.label))
        return option.answer


class MultiSelectPrompt(BasePrompt):
    """Select any number of the options, then continue.

    Below the options there is a "continue" row. The arrow keys move
    through the options and that row. Space or enter toggles an option, or
    submits when on the continue row (and something is selected).
    """

    def __init__(self, request, reader, file_out):
        super().__init__(request, reader, file_out)
        self._options = request.options
        self._selected = default_selection(self._options, request.default)
        self._index = min(self._selected) if self._selected else 0

    @property
    def on_continue_row(self):
        return self._index == len(self._options)

    def get_lines(self):
        theme = self._theme
        lines = [self.head() + self.hint()]
        for i, option in enumerate(self._options):
            marker = "> " if i == self._index else "  "
            box = "[x]" if i in self._selected else "[ ]"
            text = f"{box} {i + 1}. {option.label}"
            if option.description:
                text += " - " + option.description
            if i == self._index:
                text = theme.style("default", text)
            lines.append(marker + text)
        continue_text = self._request.continue_text or "Continue"
        if self.on_continue_row:
            lines.append("> " + theme.style("default", continue_text))
        else:
            lines.append("  " + continue_text)
        hint_line = self.hint_line()
        if hint_line:
            lines.append(hint_line)
        return lines, None

    def on_key(self, key):
        name = key.name
        n_rows = len(self._options) + 1
        if name == "ctrl+c":
            self.cancel()

        command = Command.from_key(key)
        if command is not None:
            action = self.dispatch(command)
            if action.exit:
                return self.exit(action)
            elif action.handled:
                return None

        if name == "up":
            self._index = (self._index - 1) % n_rows
        elif name == "down":
            self._index = (self._index + 1) % n_rows
        elif name == "home":
            self._index = 0
        elif name == "end":
            self._index = n_rows - 1
        elif name in ("space", "enter"):
            if not self.on_continue_row:
                self.toggle(self._index)
            elif self._selected:
                return self.submit()
        elif name == "escape" or key.function_number:
            self.cancel()
        elif key.is_printable and key.char in "123456789":
            index = int(key.char) - 1
            if index < len(self._options):
                self.toggle(index)
                self._index = index
        return None

    def toggle(self, index):
        if index in self._selected:
            self._selected.discard(index)
        else:
            self._selected.add(index)

    def submit(self):
        labels = [
            option.label
            for i, option in enumerate(self._options)
            if i in self._selected
        ]
        summary = self._theme.style("default", ", ".join(labels))
        self.finish(self.head() + ": " + summary)
        return format_selection(self._options, self._selected)


PROMPT_CLASSES = {
    "text": TextPrompt,
    "confirm": ConfirmPrompt,
    "select": SelectPrompt,
    "multi_select": MultiSelectPrompt,
}
