import pytest

from pysurvey.config import (
    Action,
    Command,
    KeyBinding,
    KeyState,
    PromptRequest,
    SelectOption,
    Theme,
    ENTER,
    ESCAPE,
    TAB,
    confirm_answer,
    default_selection,
    dispatch_command,
    format_selection,
    parse_index,
    parse_indices,
    placeholder_text,
    render_hint_line,
    suggestion_text,
)


def test_suggestion_text():
    assert suggestion_text("hello", "") == "hello"
    assert suggestion_text("hello", "he") == "llo"
    assert suggestion_text("hello", "hello") == ""
    assert suggestion_text("hello", "hex") == ""
    assert suggestion_text("hello", "hello!") == ""
    # No default, no suggestion
    for text in ["", "a", "hello"]:
        assert suggestion_text("", text) == ""


def test_suggestion_text_property():
    defaults = ["", "a", "abc", "héllo", "12 34"]
    inputs = ["", "a", "ab", "abc", "abcd", "h", "hé", "x", "12 "]
    for default in defaults:
        for text in inputs:
            suggestion = suggestion_text(default, text)
            if default and default.startswith(text):
                assert suggestion == default[len(text) :]
                assert text + suggestion == default
            else:
                assert suggestion == ""


def test_placeholder_text():
    assert placeholder_text(PromptRequest(default="x", no_default_placeholder="y")) == "x"
    assert placeholder_text(PromptRequest(no_default_placeholder="y")) == "y"
    assert placeholder_text(PromptRequest()) == ""


def test_request_kind():
    options = (SelectOption("A"),)
    assert PromptRequest().kind == "text"
    assert PromptRequest(options=options).kind == "select"
    assert PromptRequest(options=options, multi_select=True).kind == "multi_select"
    assert PromptRequest(options=options, confirm=True).kind == "confirm"
    assert PromptRequest(multi_select=True).kind == "text"


def test_request_check():
    def validate(value):
        if value != "ok":
            raise ValueError("not ok")

    request = PromptRequest(validate=validate)
    assert request.check("ok") is None
    assert request.check("nope") == "not ok"
    assert PromptRequest().check("anything") is None


def test_command():
    assert Command.function(3).label == "F3"
    assert ESCAPE.label == "ESC"
    assert TAB.label == "Tab"
    assert ENTER.label == "Enter"
    assert Command.function(12) == Command("function", 12)
    assert Command.function(12) != Command.function(11)

    with pytest.raises(ValueError):
        Command("space")
    with pytest.raises(ValueError):
        Command.function(13)
    with pytest.raises(ValueError):
        Command("tab", 2)


def test_confirm_answer():
    assert confirm_answer("", "") == "y"
    assert confirm_answer("", "n") == "n"
    assert confirm_answer("", "N") == "n"
    assert confirm_answer("", "no") == "n"
    assert confirm_answer("", "yes") == "y"
    assert confirm_answer(" Yes ", "") == "y"
    assert confirm_answer("NO", "") == "n"
    assert confirm_answer("BACK", "") == "BACK"
    assert confirm_answer("maybe", "") is None
    # The default is not case sensitive
    assert confirm_answer("", "No") == "n"
    assert confirm_answer("", "NO") == "n"
    assert confirm_answer("", " N ") == "n"
    assert confirm_answer("", "Yes") == "y"


def test_parse_indices():
    assert parse_index("2", 3) == 1
    assert parse_index("0", 3) == -1
    assert parse_index("4", 3) == -1
    assert parse_index("x", 3) == -1
    assert parse_index("²", 3) == -1
    assert parse_index("٢", 3) == -1
    assert parse_indices("1 ² 3", 3) == [0, 2]
    assert parse_indices("1,2", 3) == [0, 1]
    assert parse_indices("1 3", 3) == [0, 2]
    assert parse_indices("1, 2, 2", 3) == [0, 1, 1]
    assert parse_indices("a,b", 3) == []


def test_default_selection():
    options = (SelectOption("Alpha", "a"), SelectOption("Beta", "b"), SelectOption("C"))
    assert default_selection(options, "") == set()
    assert default_selection(options, "1,3") == {0, 2}
    assert default_selection(options, "b, C") == {1, 2}
    assert default_selection(options, "Alpha") == {0}
    assert format_selection(options, {2, 0}) == "a,C"


# %% Key bindings


def test_dispatch_without_bindings():
    request = PromptRequest()
    action = dispatch_command(request, KeyState(TAB), lambda text: None)
    assert action == Action()


def test_dispatch_inactive_binding_is_handled():
    calls = []

    def handler(context):
        calls.append(context)
        return Action(exit=True)

    request = PromptRequest(
        key_map=(KeyBinding(TAB, "Tab", handler, active=lambda state: False),)
    )
    action = dispatch_command(request, KeyState(TAB), lambda text: None)
    assert action == Action(handled=True)
    assert calls == []


def test_dispatch_handler_and_set_input():
    inputs = []

    def handler(context):
        context.set_input(context.state.default)
        return Action(handled=True)

    request = PromptRequest(key_map=(KeyBinding(TAB, "Tab", handler),))
    state = KeyState(TAB, "a", "abc", "bc")
    action = dispatch_command(request, state, inputs.append)
    assert action.handled
    assert inputs == ["abc"]


def test_dispatch_first_binding_wins():
    request = PromptRequest(
        key_map=(
            KeyBinding(ESCAPE, "One", lambda context: Action(handled=True)),
            KeyBinding(ESCAPE, "Two", lambda context: Action(exit=True)),
        )
    )
    action = dispatch_command(request, KeyState(ESCAPE), lambda text: None)
    assert action == Action(handled=True)


def test_dispatch_function_keys():
    request = PromptRequest(
        key_map=(KeyBinding(Command.function(2), "F2", lambda context: Action(exit=True)),)
    )
    action = dispatch_command(request, KeyState(Command.function(2)), lambda text: None)
    assert action.exit
    action = dispatch_command(request, KeyState(Command.function(3)), lambda text: None)
    assert action == Action()


def test_dispatch_falls_back_to_command_handler():
    seen = []

    def command_handler(context):
        seen.append(context.state.command)
        return Action(handled=True)

    request = PromptRequest(
        key_map=(KeyBinding(TAB, "Tab", lambda context: Action()),),
        command_handler=command_handler,
    )
    action = dispatch_command(request, KeyState(TAB), lambda text: None)
    assert action.handled
    action = dispatch_command(request, KeyState(ENTER), lambda text: None)
    assert action.handled
    assert seen == [TAB, ENTER]


def test_render_hint_line():
    theme = Theme(button_active_style=lambda s: f"A({s})", button_inactive_style=lambda s: f"I({s})")
    request = PromptRequest(
        theme=theme,
        key_map=(
            KeyBinding(TAB, "Autocomplete"),
            KeyBinding(ENTER, "Submit"),
        ),
    )
    line = render_hint_line(request, KeyState(None))
    assert line == "A([ Tab ] Autocomplete)    A([ Enter ] Submit)"


def test_render_hint_line_inactive():
    theme = Theme(button_active_style=lambda s: f"A({s})", button_inactive_style=lambda s: f"I({s})")
    request = PromptRequest(
        theme=theme,
        key_map=(
            KeyBinding(TAB, "Autocomplete", active=lambda state: bool(state.suggestion)),
            KeyBinding(Command.function(12), "Back"),
            KeyBinding(ESCAPE, ""),  # no description, no hint
        ),
    )
    line = render_hint_line(request, KeyState(None, "abc", "abc", ""))
    assert line == "I([ Tab ] Autocomplete)    A([ F12 ] Back)"
    assert render_hint_line(PromptRequest(), KeyState(None)) == ""


if __name__ == "__main__":
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            print(f"Running {name} ...")
            func()
    print("Done")
