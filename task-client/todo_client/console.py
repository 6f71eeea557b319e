"""Terminal front end: prints the two lists and reads one command per line."""

from __future__ import annotations

import logging
from typing import Callable, List

from todo_client.api import TaskApiClient
from todo_client.board import TaskBoard
from todo_client.config import ClientSettings
from todo_client.render import DELETE, DONE, NOT_DONE, TaskForm, TaskView
from todo_service.logging_setup import setup_logging

logger = logging.getLogger(__name__)

HELP = """Commands:
  add                      create a task (prompts for fields)
  done N | undo N          mark item N done / not done
  edit N                   edit pending item N
  del N                    delete item N
  sort dueDate|dateCreated|default
  list                     refetch and show both lists
  help | quit"""

SORT_ALIASES = {"default": None, "duedate": "dueDate", "datecreated": "dateCreated"}


def _numbered(board: TaskBoard) -> List[TaskView]:
    return board.model.pending + board.model.completed


def format_board(board: TaskBoard) -> str:
    lines = [f"TO DO (sort: {board.sort_by or 'default'})"]
    n = 0
    for title, views in (("", board.model.pending), ("COMPLETED", board.model.completed)):
        if title:
            lines.append(title)
        if not views:
            lines.append("  (empty)")
        for view in views:
            n += 1
            mark = "x" if view.struck_through else " "
            lines.append(f"  {n:>2}. [{mark}] {view.title} - {view.description}"
                         f"  (due {view.due_label}, created {view.created_label})"
                         f"  [{', '.join(view.actions)}]")
    return "\n".join(lines)


class Console:
    def __init__(self, board: TaskBoard,
                 read: Callable[[str], str] = input,
                 write: Callable[[str], None] = print) -> None:
        self.board = board
        self.read = read
        self.write = write
        board.alert = lambda message: write(f"! {message}")

    def _pick(self, arg: str) -> TaskView | None:
        views = _numbered(self.board)
        try:
            index = int(arg) - 1
        except ValueError:
            index = -1
        if 0 <= index < len(views):
            return views[index]
        self.write(f"! No item {arg!r}")
        return None

    def _prompt_form(self, form: TaskForm) -> TaskForm:
        def ask(label: str, current: str) -> str:
            hint = f" [{current}]" if current else ""
            answer = self.read(f"{label}{hint}: ").strip()
            return answer or current

        form.title = ask("Title", form.title)
        form.description = ask("Description", form.description)
        form.due_date = ask("Due date (YYYY-MM-DD)", form.due_date)
        return form

    def handle(self, line: str) -> bool:
        """Run one command; False means quit."""
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return True
        cmd, arg = parts[0].lower(), (parts[1] if len(parts) > 1 else "")

        if cmd in ("quit", "exit", "q"):
            return False
        if cmd == "help":
            self.write(HELP)
            return True
        if cmd == "list":
            self.board.refresh()
        elif cmd == "sort":
            key = arg.strip().lower()
            if key not in SORT_ALIASES:
                self.write("! sort takes dueDate, dateCreated or default")
                return True
            self.board.set_sort(SORT_ALIASES[key])
        elif cmd == "add":
            self.board.form = self._prompt_form(self.board.form)
            self.board.create()
        elif cmd in ("done", "undo", "del"):
            view = self._pick(arg)
            if view is None:
                return True
            action = {"done": DONE, "undo": NOT_DONE, "del": DELETE}[cmd]
            self.board.perform(action, view.id)
        elif cmd == "edit":
            view = self._pick(arg)
            if view is None:
                return True
            form = self.board.begin_edit(view.id)
            if form is None:
                self.write("! Completed tasks cannot be edited")
                return True
            self.board.submit_edit(self._prompt_form(form))
        else:
            self.write(f"! Unknown command {cmd!r}, try help")
            return True

        self.write(format_board(self.board))
        return True

    def run(self) -> None:
        self.board.refresh()
        self.write(format_board(self.board))
        self.write("Type help for commands.")
        while True:
            try:
                line = self.read("> ")
            except (EOFError, KeyboardInterrupt):
                self.write("")
                return
            if not self.handle(line):
                return


def main() -> None:
    settings = ClientSettings.from_env()
    setup_logging(settings.log_level)
    logger.info("Using task API at %s", settings.api_url)
    with TaskApiClient(settings.api_url) as api:
        Console(TaskBoard(api)).run()


if __name__ == "__main__":
    main()
