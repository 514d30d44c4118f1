import io

import pytest

from pysurvey.config import PromptRequest, SelectOption
from pysurvey.errors import ConfigurationError
from pysurvey.prompter import TerminalPrompter, as_options
from pysurvey.term import ByteReader
from pysurvey._main import create_demo_survey


def create_prompter(text):
    return TerminalPrompter(io.BytesIO(text.encode()), io.StringIO())


def test_missing_io():
    prompter = TerminalPrompter(io.BytesIO(b"x\n"), io.StringIO())
    prompter.stdout = None
    with pytest.raises(ConfigurationError):
        prompter.prompt(PromptRequest(label="Name"))


def test_line_mode_when_not_a_tty():
    prompter = create_prompter("Ada\n")
    assert prompter.prompt(PromptRequest(label="Name")) == "Ada"
    assert prompter.stdout.getvalue() == "? Name: "


def test_text_stdin():
    prompter = TerminalPrompter(io.StringIO("Ada\n"), io.StringIO())
    assert prompter.text("Name") == "Ada"


def test_reader_is_shared():
    prompter = create_prompter("a\nb\n")
    reader = prompter.reader
    assert isinstance(reader, ByteReader)
    assert prompter.reader is reader
    assert prompter.text("One") == "a"
    assert prompter.text("Two") == "b"

    reader = ByteReader(io.BytesIO(b"c\n"))
    assert TerminalPrompter(reader, io.StringIO()).reader is reader


def test_prompt_with_fields():
    prompter = create_prompter("\n\n")
    assert prompter.prompt(label="Name", default="Ada") == "Ada"
    request = PromptRequest(label="Name", default="Ada")
    assert prompter.prompt(request, default="Bob") == "Bob"


def test_convenience_methods():
    prompter = create_prompter("no\n2\n1 3\n\n")
    assert prompter.confirm("Sure") == "n"
    assert prompter.select("Pick", ["A", "B"]) == "B"
    assert prompter.multi_select("Pick", [("A", "a"), ("B", "b"), ("C", "c")]) == "a,c"


def test_superscript_digit_does_not_crash():
    prompter = create_prompter("²\n")
    assert prompter.select("Pick", ["A", "B", "C"]) == "²"
    prompter = create_prompter("²\n2\ndone\n")
    assert prompter.multi_select("Pick", ["A", "B", "C"]) == "B"


def test_explicit_reader():
    prompter = TerminalPrompter(io.BytesIO(b"ignored\n"), io.StringIO())
    reader = ByteReader(io.BytesIO(b"used\n"))
    assert prompter.prompt(PromptRequest(label="Name"), reader=reader) == "used"


def test_as_options():
    option = SelectOption("C", "c")
    options = as_options(["A", ("B", "b"), ("D", "d", "about d"), option])
    assert options == (
        SelectOption("A"),
        SelectOption("B", "b"),
        SelectOption("D", "d", "about d"),
        option,
    )


# %% The demo


def test_demo_survey_short():
    prompter = create_prompter("Ada\nada@x.com\n2\ny\n")
    survey = create_demo_survey(prompter)
    survey.run()
    assert survey.results() == [
        ("name", "Ada"),
        ("email", "ada@x.com"),
        ("role", "design"),
    ]


def test_demo_survey_with_languages():
    text = "Ada\nnope\nada@x.com\n1\n3\ndone\n5\n\ny\n"
    prompter = create_prompter(text)
    survey = create_demo_survey(prompter)
    survey.run()
    assert survey.answers() == ["Ada", "ada@x.com", "dev", "Python,C", "5", "1"]
    out = prompter.stdout.getvalue()
    assert "an email address needs an @" in out
    assert "Summary of your answers:" in out


if __name__ == "__main__":
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            print(f"Running {name} ...")
            func()
    print("Done")
