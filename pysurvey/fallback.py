"""
Line-based prompts, for when the input is not a terminal (e.g. a pipe), or
when the terminal cannot be put in raw mode.

Each prompt writes its question, and reads answers one line at a time,
until it gets an acceptable one.
"""

from .config import (
    confirm_answer,
    default_index,
    default_is_no,
    default_selection,
    format_selection,
    parse_index,
    parse_indices,
    placeholder_text,
)


def read_line(reader):
    """Read a line from the ``ByteReader``, without the line ending.

    Raises ``EOFError`` when the input is exhausted. A last line that has
    no newline is still returned.
    """
    line = reader.readline()
    if not line:
        raise EOFError("end of input")
    return line.rstrip("\r\n")


class LinePrompter:
    """Ask questions using plain lines of text."""

    def __init__(self, reader, file_out):
        self._reader = reader
        self._file_out = file_out

    def _write(self, text):
        self._file_out.write(text)

    def _read(self):
        self._file_out.flush()
        return read_line(self._reader).strip()

    def _head(self, request):
        theme = request.theme
        return theme.style("prefix", theme.prefix) + theme.style("label", request.label)

    def _hint(self, request):
        theme = request.theme
        return " " + theme.style("hint", theme.hint) if theme.hint else ""

    def _error(self, request, message):
        theme = request.theme
        line = theme.style("error", theme.error) + theme.style("error", message)
        self._write(line + "\n")

    def prompt(self, request):
        return getattr(self, request.kind)(request)

    def text(self, request):
        while True:
            self._write(self._head(request))
            placeholder = placeholder_text(request)
            if placeholder:
                self._write(" [" + request.theme.style("placeholder", placeholder) + "]")
            self._write(": ")

            text = self._read()
            if request.is_back(text):
                return text
            value = text or request.default
            error = request.check(value)
            if error is None:
                return value
            self._error(request, error)

    def confirm(self, request):
        choices = " (y/N)" if default_is_no(request.default) else " (Y/n)"
        while True:
            self._write(self._head(request) + choices + self._hint(request) + ": ")
            answer = confirm_answer(self._read(), request.default)
            if answer is not None:
                return answer
            self._error(request, "please enter 'y' or 'n'")

    def select(self, request):
        options = request.options
        index = default_index(options, request.default)

        while True:
            self._write(self._head(request) + self._hint(request) + "\n")
            for i, option in enumerate(options):
                marker = ">" if i == max(index, 0) else " "
                line = f"{marker} {option.label}"
                if option.description:
                    line += " - " + option.description
                self._write(line + "\n")
            self._write("> ")

            text = self._read()
            if not text:
                return options[max(index, 0)].answer
            elif request.is_back(text):
                return text

            i = parse_index(text, len(options))
            if i >= 0:
                return options[i].answer

            lowered = text.lower()
            for option in options:
                if lowered in (option.value.lower(), option.label.lower()):
                    return option.answer
                elif option.label.lower().startswith(lowered):
                    return option.answer

            # Nothing matched. Without a validator we accept the text as is.
            error = request.check(text)
            if error is None:
                return text
            self._error(request, error)

    def multi_select(self, request):
        options = request.options
        selected = default_selection(options, request.default)

        while True:
            self._write(self._head(request) + self._hint(request) + "\n")
            for i, option in enumerate(options):
                box = "[x]" if i in selected else "[ ]"
                line = f"{box} {i + 1}. {option.label}"
                if option.description:
                    line += " - " + option.description
                self._write(line + "\n")
            self._write("> ")

            text = self._read()
            if request.is_back(text):
                return text
            elif not text or text.lower() in ("done", "finish", "q"):
                if selected:
                    return format_selection(options, selected)
                self._error(request, "Please select at least one option")
                continue

            indices = parse_indices(text, len(options))
            if indices:
                for i in indices:
                    selected ^= {i}
                continue

            lowered = text.lower()
            for i, option in enumerate(options):
                if lowered in (option.value.lower(), option.label.lower()):
                    selected ^= {i}
                    break
            else:
                self._error(
                    request, "Invalid selection. Enter option numbers (e.g., 1,2,3)"
                )
