"""Extra documentation for tasks declared in the configuration file.

Tasks live under the top-level ``tasks`` section:

```yaml
tasks:
  test:
    doc: Run the test suite
    details: |
      Longer explanation printed by `maestro doc test`.
```

Lookups return a :class:`HelpResult` whose ``type`` selects the printer used
by :func:`render`:

| Type                 | Meaning                                   |
|----------------------|-------------------------------------------|
| ``task``             | Task found, ``body``/``docstring`` filled |
| ``not-found``        | Requested task does not exist             |
| ``no-task``          | No task was requested                     |
| ``no-tasks``         | The configuration declares no tasks       |
| ``undocumented``     | Listing of tasks lacking ``details``      |
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from .config_file import MaestroConfig
from .text import realign

NO_DOCUMENTATION = "No documentation found for this task."


@dataclass
class HelpResult:
    type: str
    task: Optional[str] = None
    tasks: List[str] = field(default_factory=list)
    docstring: Optional[str] = None
    body: Optional[str] = None


Printer = Callable[[HelpResult], str]


def _body_from_docs_dir(task: str, docs_dir: Optional[Path], extension: str) -> Optional[str]:
    if docs_dir is None:
        return None
    path = Path(docs_dir) / f"{task}{extension}"
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


def task_help(
    config: MaestroConfig,
    task: Optional[str],
    *,
    docs_dir: Optional[Path] = None,
    extension: str = ".txt",
) -> HelpResult:
    """Look up documentation for ``task``.

    The body comes from the task's ``details`` key (realigned), else from
    ``<docs_dir>/<task><extension>`` when a docs directory is given.
    """
    tasks = config.tasks
    if not tasks:
        return HelpResult(type="no-tasks")
    names = sorted(tasks, key=str.lower)
    if not task:
        return HelpResult(type="no-task", tasks=names)
    data = tasks.get(task)
    if data is None:
        return HelpResult(type="not-found", task=task, tasks=names)
    details = data.get("details")
    body = realign(details) if details else _body_from_docs_dir(task, docs_dir, extension)
    return HelpResult(type="task", task=task, tasks=names, docstring=data.get("doc"), body=body)


def undocumented_tasks(config: MaestroConfig) -> HelpResult:
    """List tasks without ``details``, sorted case-insensitively."""
    names = [name for name, data in config.tasks.items() if not data.get("details")]
    return HelpResult(type="undocumented", tasks=sorted(names, key=str.lower))


# ---------- Printers ----------


def _print_task(result: HelpResult) -> str:
    parts: List[str] = []
    if result.docstring:
        parts.extend([result.docstring, "", "---", ""])
    parts.append(result.body or NO_DOCUMENTATION)
    return "\n".join(parts)


def _print_not_found(result: HelpResult) -> str:
    lines = [f"Task not found: {result.task}", "", "Available tasks:"]
    lines.extend(f"  {name}" for name in result.tasks)
    return "\n".join(lines)


def _print_no_task(result: HelpResult) -> str:
    lines = ["No task given. Available tasks:"]
    lines.extend(f"  {name}" for name in result.tasks)
    return "\n".join(lines)


def _print_no_tasks(result: HelpResult) -> str:
    return "No tasks found in configuration."


def _print_undocumented(result: HelpResult) -> str:
    if not result.tasks:
        return "All tasks are documented."
    return "\n".join(result.tasks)


PRINTERS: Dict[str, Printer] = {
    "task": _print_task,
    "not-found": _print_not_found,
    "no-task": _print_no_task,
    "no-tasks": _print_no_tasks,
    "undocumented": _print_undocumented,
}


def render(result: HelpResult, printers: Optional[Mapping[str, Printer]] = None) -> str:
    """Render ``result`` with the printer registered for its type.

    ``printers`` is merged over :data:`PRINTERS`.
    """
    table = {**PRINTERS, **(printers or {})}
    try:
        printer = table[result.type]
    except KeyError:
        raise ValueError(f"No printer for help result type: {result.type}") from None
    return printer(result)


__all__ = [
    "HelpResult",
    "NO_DOCUMENTATION",
    "PRINTERS",
    "render",
    "task_help",
    "undocumented_tasks",
]
