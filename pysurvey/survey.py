"""
Surveys: chains of questions, where the answer to one question determines
what is asked next.

A survey keeps a stack of questions to ask. After a question is answered,
the branch for that answer is executed, which can push more questions on
the stack. Since the stack is LIFO, the survey is depth-first: questions
pushed by an answer are asked before the ones that were already pending.

With undo enabled, the user can go back to the previous question, by
answering "back" (in line mode) or pressing Escape or F12 (in a terminal).
"""

import logging
import dataclasses
from typing import Optional

from .config import (
    ESCAPE,
    ENTER,
    NO_DEFAULT_PLACEHOLDER,
    TAB,
    Action,
    Command,
    KeyBinding,
    PromptRequest,
)
from .errors import ConfigurationError, GoBack
from .prompter import TerminalPrompter


logger = logging.getLogger("pysurvey")

END_CARD_TEXT = "Survey complete. Are you satisfied with your answers?"


@dataclasses.dataclass
class Question:
    """A question in a survey.

    The ``branches`` map an answer to the ``Branch`` to execute. The branch
    for the empty string is used for answers that have no branch.
    """

    id: str
    request: PromptRequest
    branches: dict = dataclasses.field(default_factory=dict)


# %% Branches


class Branch:
    """What to do after a question is answered."""

    def execute(self, answer, survey):
        raise NotImplementedError()


class PushQuestion(Branch):
    """Ask the registered question with the given id next."""

    def __init__(self, question_id):
        self.question_id = question_id

    def __repr__(self):
        return f"<PushQuestion {self.question_id!r}>"

    def execute(self, answer, survey):
        survey.push(self.question_id)


class Handler(Branch):
    """Call a function with the answer and the survey.

    The function can e.g. push questions, or ``ask()`` new ones.
    """

    def __init__(self, func):
        self.func = func

    def __repr__(self):
        return f"<Handler {getattr(self.func, '__name__', self.func)}>"

    def execute(self, answer, survey):
        self.func(answer, survey)


class End(Branch):
    """End the survey, dropping any pending questions."""

    def __repr__(self):
        return "<End>"

    def execute(self, answer, survey):
        survey.end()


def push_question(question_id):
    return PushQuestion(question_id)


def handler(func):
    return Handler(func)


def end():
    return End()


# %% The survey


@dataclasses.dataclass
class _Step:
    """An answered question, and the stack as it was before it was asked (with undo)."""

    question: Question
    answer: str
    stack: Optional[list]


class Survey:
    """A depth-first survey of questions.

    Parameters:
        prompter: the object to ask the questions with; anything with a
            ``prompt(request)`` method.
        undo (bool): whether the user can go back to previous questions.
        end_card (bool): whether to show a summary at the end, and ask
            whether the user is satisfied with it.
        end_card_text (str): the question of the end card.
        end_card_theme (Theme): the theme of the end card.
    """

    def __init__(
        self,
        prompter,
        undo=False,
        end_card=False,
        end_card_text=None,
        end_card_theme=None,
    ):
        self._prompter = prompter
        self._undo = bool(undo)
        self._end_card = bool(end_card)
        self._end_card_text = end_card_text or END_CARD_TEXT
        self._end_card_theme = end_card_theme

        # All questions are answered from one reader, if the prompter has one
        self._reader = None
        if isinstance(prompter, TerminalPrompter):
            self._reader = prompter.reader

        self._questions = {}
        self._stack = []
        self._steps = []  # the answered questions
        self._dynamic_count = 0

    @classmethod
    def from_questions(cls, prompter, questions, start_id, **options):
        """Create a survey from a list of questions, and start at the given one."""
        survey = cls(prompter, **options)
        survey.add_questions(questions)
        survey.start(start_id)
        return survey

    @property
    def undo_enabled(self):
        return self._undo

    # Questions

    def add_question(self, question):
        if question.branches is None:
            question.branches = {}
        self._questions[question.id] = question

    def add_questions(self, questions):
        for question in questions:
            self.add_question(question)

    def question(self, question_id, request):
        """Get a builder for a question. Call ``register()`` to add it."""
        return QuestionBuilder(self, question_id, request)

    def start(self, question_id):
        """Push the question with the given id, to be asked first."""
        self.push(question_id)

    def push(self, question_id):
        """Push the registered question with the given id on the stack."""
        question = self._questions.get(question_id)
        if question is None:
            logger.warning(f"no question with id {question_id!r}")
            return
        self._stack.append(question)

    def end(self):
        """Drop all pending questions, so the survey ends after the current one."""
        self._stack.clear()

    def ask(self, request, handler=None):
        """Push a new (unregistered) question, with a handler for its answer."""
        self._dynamic_count += 1
        question = Question(f"_dynamic_{self._dynamic_count}", request)
        if handler is not None:
            question.branches[""] = Handler(handler)
        self._stack.append(question)

    # Results

    def answers(self):
        """The answers so far, in the order they were given."""
        return [step.answer for step in self._steps]

    def question_ids(self):
        return [step.question.id for step in self._steps]

    def results(self):
        """A list of (question_id, answer) tuples."""
        return [(step.question.id, step.answer) for step in self._steps]

    def clear(self):
        """Forget all answers and pending questions."""
        self._stack.clear()
        self._steps.clear()

    # Running

    def run(self):
        """Ask questions until there are none left."""
        logger.info("survey started")
        while True:
            while self._stack:
                # The stack as it was, to return to when this answer is undone
                stack_before = list(self._stack) if self._undo else None
                question = self._stack.pop()
                request = self._prepare_request(question.request)

                try:
                    answer = self._ask(request)
                except GoBack:
                    self._go_back(question)
                    continue
                if self._undo and answer.strip().lower() == "back":
                    self._go_back(question)
                    continue

                self._steps.append(_Step(question, answer, stack_before))
                branch = question.branches.get(answer) or question.branches.get("")
                if branch is not None:
                    branch.execute(answer, self)

            if not self._end_card or self._run_end_card():
                break
        logger.info("survey finished")

    def _ask(self, request):
        if self._reader is not None:
            return self._prompter.prompt(request, reader=self._reader)
        return self._prompter.prompt(request)

    def _can_go_back(self):
        return self._undo and len(self._steps) > 0

    def _go_back(self, current=None):
        """Undo the last answer, so that its question is asked again."""
        if self._can_go_back():
            step = self._steps.pop()
            self._stack[:] = step.stack
            logger.debug(f"going back to {step.question.id!r}")
        elif current is not None:
            self._stack.append(current)

    def _back_binding(self, command):
        def on_back(context):
            if self._can_go_back():
                return Action(exit=True, error=GoBack())
            return Action(handled=True)

        return KeyBinding(
            command,
            "Back",
            handler=on_back,
            active=lambda state: self._can_go_back(),
        )

    def _add_back_bindings(self, key_map):
        key_map = ensure_binding(key_map, self._back_binding(ESCAPE))
        return ensure_binding(key_map, self._back_binding(Command.function(12)))

    def _prepare_request(self, request):
        changes = {}
        if not request.no_default_placeholder:
            changes["no_default_placeholder"] = NO_DEFAULT_PLACEHOLDER
        if request.kind == "multi_select" and not request.continue_text:
            changes["continue_text"] = "Continue" if self._stack else "Finish"

        key_map = tuple(request.key_map)
        if request.kind == "text":
            key_map = ensure_binding(
                key_map,
                KeyBinding(
                    TAB,
                    "Autocomplete",
                    active=lambda state: bool(state.default and state.suggestion),
                ),
            )
            key_map = ensure_binding(key_map, KeyBinding(ENTER, "Submit"))
        if self._undo:
            key_map = self._add_back_bindings(key_map)
            changes["allow_back"] = True
        changes["key_map"] = key_map

        return dataclasses.replace(request, **changes)

    # End card

    def _run_end_card(self):
        """Show the summary and ask for confirmation. Returns True when done."""
        self._render_summary()

        theme_fields = {}
        if self._end_card_theme is not None:
            theme_fields["theme"] = self._end_card_theme
        if self._can_go_back():
            request = PromptRequest(
                label=self._end_card_text,
                no_default_placeholder=NO_DEFAULT_PLACEHOLDER,
                key_map=self._add_back_bindings(()),
                allow_back=True,
                **theme_fields,
            )
        else:
            request = PromptRequest(
                label=self._end_card_text, confirm=True, **theme_fields
            )

        try:
            answer = self._ask(request)
        except GoBack:
            answer = "back"

        if answer.strip().lower() in ("n", "no", "back") and self._can_go_back():
            self._go_back()
            return False
        return True

    def _render_summary(self):
        out = getattr(self._prompter, "stdout", None)
        if out is None:
            raise ConfigurationError("no output stream to write the summary to")
        theme = self._end_card_theme
        lines = ["", "Summary of your answers:"]
        for step in self._steps:
            answer = step.answer
            if theme is not None:
                answer = theme.style("default", answer)
            if step.question.id.startswith("_dynamic_") and not step.question.request.label:
                lines.append(f"  • {answer}")
            else:
                label = step.question.request.label or step.question.id
                if theme is not None:
                    label = theme.style("label", label)
                lines.append(f"  {label}: {answer}")
        out.write("\n".join(lines) + "\n\n")
        out.flush()


def ensure_binding(key_map, binding):
    """Add the binding, unless there is one for the same command already."""
    key_map = tuple(key_map)
    if any(b.command == binding.command for b in key_map):
        return key_map
    return key_map + (binding,)


class QuestionBuilder:
    """Build a question and its branches, one call at a time.

    Example::

        survey.question("pet", request).on("dog", push_question("breed")).then("name").register()
    """

    def __init__(self, survey, question_id, request):
        self._survey = survey
        self._question = Question(question_id, request)

    def on(self, answer, branch):
        """Set the branch for a specific answer."""
        self._question.branches[answer] = branch
        return self

    def then(self, question_id):
        """Ask the given question next, for any answer without a branch."""
        self._question.branches[""] = PushQuestion(question_id)
        return self

    def then_func(self, func):
        """Call the given function, for any answer without a branch."""
        self._question.branches[""] = Handler(func)
        return self

    def end(self):
        """End the survey after this question (for answers without a branch)."""
        self._question.branches[""] = End()
        return self

    def register(self):
        """Add the question to the survey. Returns the question."""
        self._survey.add_question(self._question)
        return self._question
