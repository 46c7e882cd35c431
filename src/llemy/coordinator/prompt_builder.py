"""Build prompts for the coding agent and the hosted planner.

Modes:
- implement: hand a llemy-todo issue to the coding agent
- plan: ask the hosted LLM to turn a plan document into a todo document
"""

from ..common.models import IssueRecord
from .documents import NO_BODY, UNTITLED


def build_implementation_prompt(issue: IssueRecord) -> str:
    """Build the prompt that asks the coding agent to implement an issue."""
    body = issue.body if issue.body and issue.body.strip() else NO_BODY
    return "\n".join(
        [
            f"Implement GitHub issue {issue.tag} exactly as written.",
            f"Issue title: {issue.title or UNTITLED}",
            f"Issue URL: {issue.url}",
            "",
            "Issue body:",
            body,
            "",
            "Execution requirements:",
            "- Apply the requested changes in this repository.",
            "- Keep the implementation faithful to the issue text.",
            "- Run any relevant verification commands and include their outcomes.",
            "- Return a concise completion summary with changed files and checks run.",
        ]
    )


def build_planning_prompt(plan_content: str, policy: str) -> str:
    """Build the prompt that asks the hosted LLM for a todo document."""
    return f"""{policy}

---

Here is the plan file to process:

{plan_content}

---

Please generate the LLEMY_TODO_ISSUE following the exact format specified in the CLAUDE.md policy.
The response must contain a `TITLE:` line, a `LABELS:` line with comma-separated labels,
and a `BODY:` line followed by a fenced ```md block holding the issue body."""
