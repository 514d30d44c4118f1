import sys

from .config import COLORFUL_THEME, PromptRequest
from .errors import CancelledError, ValidationError
from .prompter import TerminalPrompter, as_options
from .survey import Question, Survey, end, handler, push_question


def check_email(value):
    if "@" not in value:
        raise ValidationError("an email address needs an @")


def create_demo_survey(prompter):
    """A small survey that shows the different kinds of prompts."""

    def request(**kwargs):
        return PromptRequest(theme=COLORFUL_THEME, **kwargs)

    def on_languages(answer, survey):
        # Ask about each chosen language, the first one first
        for language in reversed(answer.split(",")):
            survey.ask(request(label=f"Years of experience with {language}", default="1"))

    questions = [
        Question("name", request(label="What is your name")),
        Question("email", request(label="Email address", validate=check_email)),
        Question(
            "role",
            request(
                label="What do you do",
                options=as_options(
                    [
                        ("Developer", "dev", "I write code"),
                        ("Designer", "design", "I make things look good"),
                        ("Other", "other"),
                    ]
                ),
            ),
            {"dev": push_question("languages"), "": end()},
        ),
        Question(
            "languages",
            request(
                label="Which languages do you use",
                options=as_options(["Python", "Go", "Rust", "C"]),
                multi_select=True,
                default="1",
            ),
            {"": handler(on_languages)},
        ),
    ]
    questions[0].branches[""] = push_question("email")
    questions[1].branches[""] = push_question("role")

    return Survey.from_questions(
        prompter,
        questions,
        "name",
        undo=True,
        end_card=True,
        end_card_theme=COLORFUL_THEME,
    )


def main():
    prompter = TerminalPrompter()
    survey = create_demo_survey(prompter)
    try:
        survey.run()
    except CancelledError:
        sys.stderr.write("Cancelled.\n")
        return 1
    except EOFError:
        sys.stderr.write("No more input.\n")
        return 1
    for question_id, answer in survey.results():
        print(f"{question_id}: {answer}")
    return 0
