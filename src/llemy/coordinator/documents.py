"""Plan and todo documents exchanged with the planner.

A plan document describes the source issue:

    # Source Issue

    - Repo: owner/name
    - Number: 42
    - URL: https://github.com/owner/name/issues/42

    ## Title

    Issue title

    ## Body

    Issue body

A todo document describes the ticket to create:

    TITLE: Add retry to the uploader
    LABELS: backend, good-first-issue
    BODY: ```md
    Full ticket body in markdown.
    ```

Every todo field is optional. A missing title falls back to a
caller-supplied one, missing labels to none, and a missing fenced body to
the whole document.
"""

import re
from pathlib import Path

from ..common.errors import ValidationError
from ..common.models import IssueRecord, TodoTicket

UNTITLED = "_Untitled_"
NO_BODY = "_No issue body_"

PLAN_PATTERN = re.compile(
    r"\A# Source Issue\n\n"
    r"- Repo: (?P<repo>[^\n]*)\n"
    r"- Number: (?P<number>\d+)\n"
    r"- URL: (?P<url>[^\n]*)\n\n"
    r"## Title\n\n(?P<title>[^\n]*)\n\n"
    r"## Body\n\n(?P<body>.*)\n\Z",
    re.DOTALL,
)

TITLE_PATTERN = re.compile(r"^TITLE:[ \t]*(?P<title>\S.*?)[ \t]*\r?$", re.MULTILINE)
LABELS_PATTERN = re.compile(r"^LABELS:[ \t]*(?P<labels>.+?)\r?$", re.MULTILINE)
BODY_PATTERN = re.compile(
    r"^BODY:\s*```(?:md|markdown)?[ \t]*\r?\n(?P<body>.*?)\r?\n```",
    re.MULTILINE | re.DOTALL,
)


def render_plan(issue: IssueRecord) -> str:
    """Render the plan document for an issue."""
    body = issue.body if issue.body and issue.body.strip() else NO_BODY
    return "\n".join(
        [
            "# Source Issue",
            "",
            f"- Repo: {issue.repo}",
            f"- Number: {issue.number}",
            f"- URL: {issue.url}",
            "",
            "## Title",
            "",
            issue.title or UNTITLED,
            "",
            "## Body",
            "",
            body,
            "",
        ]
    )


def parse_plan(text: str) -> IssueRecord:
    """Recover the source issue from a plan document."""
    match = PLAN_PATTERN.match(text)
    if not match:
        raise ValidationError("Not a plan document")
    return IssueRecord(
        repo=match.group("repo"),
        number=int(match.group("number")),
        url=match.group("url"),
        title=match.group("title"),
        body=match.group("body"),
    )


def write_plan(path: str | Path, issue: IssueRecord) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_plan(issue), encoding="utf-8")
    return path


def parse_todo(text: str, fallback_title: str, required_label: str) -> TodoTicket:
    """
    Extract a ticket from a todo document.

    Args:
        text: The document.
        fallback_title: Title used when there is no TITLE line.
        required_label: Label every ticket must carry; prepended if absent.

    Raises:
        ValidationError: No title or no body could be determined.
    """
    title_match = TITLE_PATTERN.search(text)
    labels_match = LABELS_PATTERN.search(text)
    body_match = BODY_PATTERN.search(text)

    title = title_match.group("title").strip() if title_match else (fallback_title or "").strip()
    body = body_match.group("body").strip() if body_match else text.strip()

    labels: list[str] = []
    if labels_match:
        for label in labels_match.group("labels").split(","):
            label = label.strip()
            if label and label not in labels:
                labels.append(label)
    if required_label and required_label not in labels:
        labels.insert(0, required_label)

    if not title:
        raise ValidationError("Missing TITLE")
    if not body:
        raise ValidationError("Missing BODY")

    return TodoTicket(title=title, labels=labels, body=body)


def parse_todo_file(path: str | Path, fallback_title: str, required_label: str) -> TodoTicket:
    """Read and parse a todo document; errors name the file."""
    path = Path(path)
    try:
        return parse_todo(path.read_text(encoding="utf-8"), fallback_title, required_label)
    except ValidationError as e:
        raise ValidationError(f"{e} in {path}") from e
