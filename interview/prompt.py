"""Terminal prompt renderer.

Renders Question records one at a time with input(), in the CLI's
`[default]` / `[Y/n]` / numbered-list style. Invalid input is reported
and asked again; it never escapes as an exception.
"""

import inspect
from typing import Any

from interview.choices import Choice, Separator
from interview.questions import Question, QuestionKind
from interview.scope import Answers, InterviewScope

# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_invalid(msg: str) -> None:
    print(f"  \033[31m>>\033[0m {msg}")


async def evaluate(rule: Any, answers: Answers, scope: InterviewScope) -> Any:
    """Resolve a value-or-callable rule, awaiting it if needed."""
    value = rule(answers, scope) if callable(rule) else rule
    if inspect.isawaitable(value):
        value = await value
    return value


# ---------------------------------------------------------------------------
# Single-question prompts
# ---------------------------------------------------------------------------


def _prompt(question: str, default: str = "") -> str:
    """Prompt user with optional default."""
    if default:
        answer = input(f"  {question} [{default}]: ").strip()
        return answer or default
    return input(f"  {question}: ").strip()


def _prompt_yn(question: str, default: bool = True) -> bool:
    """Yes/no prompt."""
    suffix = "[Y/n]" if default else "[y/N]"
    answer = input(f"  {question} {suffix}: ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def _prompt_choice(question: str, items: list[Choice | Separator], default: Any) -> Choice:
    """Numbered choice prompt. Separators are shown but not numbered."""
    choices = [c for c in items if isinstance(c, Choice)]
    default_idx = next((i for i, c in enumerate(choices) if c.value == default), 0)
    while True:
        print(f"  {question}")
        n = 0
        for item in items:
            if isinstance(item, Separator):
                print(f"      {item.line}")
                continue
            n += 1
            marker = " *" if n - 1 == default_idx else ""
            print(f"    ({n}) {item.name}{marker}")
        answer = input(f"  Choice [{default_idx + 1}]: ").strip()
        if not answer:
            return choices[default_idx]
        try:
            idx = int(answer) - 1
            if 0 <= idx < len(choices):
                return choices[idx]
        except ValueError:
            pass
        _print_invalid(f"Enter a number between 1 and {len(choices)}.")


class Prompter:
    """Asks a list of questions in order and returns the answers given."""

    async def prompt(self, questions: list[Question], scope: InterviewScope) -> Answers:
        answers: Answers = {}
        for q in questions:
            view = {**scope.user_answers, **answers}
            if not await evaluate(q.when, view, scope):
                continue
            default = await evaluate(q.default, view, scope)
            answers[q.name] = self.ask(q, default)
        return answers

    def ask(self, q: Question, default: Any) -> Any:
        if q.kind == QuestionKind.CONFIRM:
            return _prompt_yn(q.message, default=bool(default))

        if q.kind == QuestionKind.LIST:
            choice = _prompt_choice(q.message, q.choices, default)
            print(f"  \033[2m-> {choice.short}\033[0m")
            value: Any = choice.value
            return q.filter(value) if q.filter else value

        default_text = "" if default is None else str(default)
        while True:
            value = _prompt(q.message, default=default_text)
            if q.validate is not None:
                result = q.validate(value)
                if result is not True:
                    _print_invalid(str(result))
                    continue
            return q.filter(value) if q.filter else value
