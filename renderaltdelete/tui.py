"""Terminal interface for picking a workspace and deleting its resources."""

from __future__ import annotations

import enum
import queue
import threading
import unicodedata
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

from .models import Owner, Postgres, Redis, Service

DELETE_STATUS_PENDING = "pending"
DELETE_STATUS_WORKING = "working"
DELETE_STATUS_DONE = "deleted"

_BORDER_RGB = (0x69, 0x91, 0xAC)
_PADDING = (2, 4, 2, 4)
_MARGIN = (2, 4, 2, 4)


class RenderService(Protocol):
    """What the interface needs from the platform."""

    def list_services(self, owner_id: str) -> List[Service]: ...

    def delete_service(self, service_id: str) -> None: ...

    def list_postgres(self, owner_id: str) -> List[Postgres]: ...

    def delete_postgres(self, postgres_id: str) -> None: ...

    def list_redis(self, owner_id: str) -> List[Redis]: ...

    def delete_redis(self, redis_id: str) -> None: ...

    def list_authorized_owners(self) -> List[Owner]: ...


class Status(enum.Enum):
    """The screen the interface is showing."""

    SELECT_TEAM = 1
    SELECT = 2
    REVIEW = 3
    DELETING = 4
    ERROR = 5


@dataclass
class Resource:
    """A resource that can be chosen for deletion."""

    name: str
    resource_type: str
    delete: Callable[[RenderService], None]
    selected: bool = False
    delete_status: str = ""


@dataclass
class Model:
    """State of the interface and how keys change it."""

    render_service: RenderService
    status: Status = Status.SELECT_TEAM
    resources: List[Resource] = field(default_factory=list)
    cursor: int = 0
    owner_id: str = ""
    owners: List[Owner] = field(default_factory=list)
    error_message: str = ""
    _updates: "queue.Queue[None]" = field(
        default_factory=queue.Queue, init=False, repr=False
    )
    _worker: Optional[threading.Thread] = field(default=None, init=False, repr=False)

    def __init__(self, render_service: RenderService) -> None:
        self.render_service = render_service
        self.status = Status.SELECT_TEAM
        self.resources = []
        self.cursor = 0
        self.owner_id = ""
        self.owners = []
        self.error_message = ""
        self._updates = queue.Queue()
        self._worker = None
        self._init_team_select()

    # -- key handling -------------------------------------------------------

    def handle_key(self, key: str) -> bool:
        """Apply a key press; return True when the program should quit."""
        if key in ("ctrl+c", "q"):
            return True
        if self.status is Status.REVIEW:
            self._key_review(key)
        elif self.status is Status.SELECT:
            self._key_select(key)
        elif self.status is Status.SELECT_TEAM:
            self._key_select_team(key)
        return False

    def _key_select_team(self, key: str) -> None:
        if key in ("up", "k"):
            if self.cursor > 0:
                self.cursor -= 1
        elif key in ("down", "j"):
            if self.cursor < len(self.owners) - 1:
                self.cursor += 1
        elif key in ("enter", " "):
            if not self.owners:
                return
            self.owner_id = self.owners[self.cursor].id
            self._init_select()

    def _key_select(self, key: str) -> None:
        if key in ("up", "k"):
            if self.cursor > 0:
                self.cursor -= 1
        elif key in ("down", "j"):
            if self.cursor < len(self.resources):
                self.cursor += 1
        elif key in ("enter", " "):
            if self.cursor == len(self.resources):
                self._init_review()
            else:
                resource = self.resources[self.cursor]
                resource.selected = not resource.selected

    def _key_review(self, key: str) -> None:
        if key in ("up", "k"):
            if self.cursor > 0:
                self.cursor -= 1
        elif key in ("down", "j"):
            if self.cursor < 1:
                self.cursor += 1
        elif key in ("enter", " "):
            if self.cursor == 1:
                self._init_deleting()
            else:
                self.status = Status.SELECT

    # -- state transitions --------------------------------------------------

    def _fail(self, message: str) -> None:
        self.error_message = message
        self.status = Status.ERROR

    def _init_team_select(self) -> None:
        self.status = Status.SELECT_TEAM
        self.cursor = 0
        try:
            owners = self.render_service.list_authorized_owners()
        except Exception as exc:
            self._fail(f"failed to list authorized owners: {exc}")
            return
        self.owners = list(owners)

    def _init_select(self) -> None:
        self.status = Status.SELECT
        self.cursor = 0
        self.resources = []
        service = self.render_service

        try:
            services = service.list_services(self.owner_id)
        except Exception as exc:
            self._fail(f"failed to list services: {exc}")
            return
        self.resources.extend(
            Resource(
                name=svc.name,
                resource_type="Service",
                delete=lambda rs, ident=svc.id: rs.delete_service(ident),
            )
            for svc in services
        )

        try:
            databases = service.list_postgres(self.owner_id)
        except Exception as exc:
            self._fail(f"failed to list Postgres: {exc}")
            return
        self.resources.extend(
            Resource(
                name=db.name,
                resource_type="Postgres",
                delete=lambda rs, ident=db.id: rs.delete_postgres(ident),
            )
            for db in databases
        )

        try:
            instances = service.list_redis(self.owner_id)
        except Exception as exc:
            self._fail(f"failed to list Redis: {exc}")
            return
        self.resources.extend(
            Resource(
                name=inst.name,
                resource_type="Redis",
                delete=lambda rs, ident=inst.id: rs.delete_redis(ident),
            )
            for inst in instances
        )

    def _init_review(self) -> None:
        self.status = Status.REVIEW
        self.cursor = 0
        for resource in self.resources:
            if resource.selected:
                resource.delete_status = DELETE_STATUS_PENDING

    def _init_deleting(self) -> None:
        self.status = Status.DELETING
        self.cursor = 0
        self._worker = threading.Thread(target=self._delete_selected, daemon=True)
        self._worker.start()

    def _delete_selected(self) -> None:
        for resource in self.resources:
            if not (
                resource.selected and resource.delete_status == DELETE_STATUS_PENDING
            ):
                continue
            resource.delete_status = DELETE_STATUS_WORKING
            self._updates.put(None)
            try:
                resource.delete(self.render_service)
            except Exception as exc:
                resource.delete_status = f"failed to delete: {exc}"
            else:
                resource.delete_status = DELETE_STATUS_DONE
            self._updates.put(None)

    def wait_for_update(self, timeout: Optional[float] = None) -> bool:
        """Wait for a deletion status change; False if none came in time."""
        try:
            self._updates.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def join_deletions(self, timeout: Optional[float] = None) -> bool:
        """Wait for the deletion worker; True once it has finished."""
        if self._worker is None:
            return True
        self._worker.join(timeout)
        return not self._worker.is_alive()

    # -- rendering ----------------------------------------------------------

    def content(self) -> str:
        """The unstyled screen text, footer included."""
        views = {
            Status.SELECT_TEAM: self._view_team_select,
            Status.SELECT: self._view_select,
            Status.REVIEW: self._view_review,
            Status.DELETING: self._view_deleting,
            Status.ERROR: self._view_error,
        }
        return "".join(views[self.status]()) + "\nPress q to quit."

    def view(self) -> str:
        """The screen text inside its bordered box."""
        return style_content(self.content())

    def _view_team_select(self):
        yield "What workspace should we delete services from?\n\n"
        for i, owner in enumerate(self.owners):
            cursor = ">" if self.cursor == i else " "
            yield f"{cursor} {owner.name} - {owner.email}\n"

    def _view_select(self):
        yield "What services should we delete?\n\n"
        for i, resource in enumerate(self.resources):
            cursor = ">" if self.cursor == i else " "
            checked = "x" if resource.selected else " "
            yield f"{cursor} [{checked}] {resource.name} - {resource.resource_type}\n"
        cursor = ">" if self.cursor == len(self.resources) else " "
        yield f"\n{cursor} Done\n"

    def _view_review(self):
        yield "Going to delete the following services:\n\n"
        for resource in self.resources:
            if resource.selected:
                yield f" {resource.name} - {resource.resource_type}\n"
        if self.cursor == 0:
            yield "\n [x] No\n [ ] Yes\n"
        else:
            yield "\n [ ] No\n [x] Yes\n"

    def _view_deleting(self):
        yield "\n"
        for resource in self.resources:
            if resource.selected:
                yield (
                    f" {resource.delete_status} {resource.name}"
                    f" - {resource.resource_type}\n"
                )

    def _view_error(self):
        yield f"Error: {self.error_message}"


def _cell_width(text: str) -> int:
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _render_box(content: str, paint: Callable[[str], str] = str) -> str:
    top_pad, right_pad, bottom_pad, left_pad = _PADDING
    top_margin, right_margin, bottom_margin, left_margin = _MARGIN

    lines = content.replace("\r\n", "\n").replace("\t", "    ").split("\n")
    width = max(_cell_width(line) for line in lines)
    inner = width + left_pad + right_pad

    blank = " " * inner
    body = (
        [blank] * top_pad
        + [
            " " * left_pad + line + " " * (width - _cell_width(line)) + " " * right_pad
            for line in lines
        ]
        + [blank] * bottom_pad
    )
    boxed = (
        [paint("╭" + "─" * inner + "╮")]
        + [paint("│") + row + paint("│") for row in body]
        + [paint("╰" + "─" * inner + "╯")]
    )

    margin_row = " " * (left_margin + inner + 2 + right_margin)
    rows = (
        [margin_row] * top_margin
        + [" " * left_margin + row + " " * right_margin for row in boxed]
        + [margin_row] * bottom_margin
    )
    return "\n".join(rows)


def style_content(content: str) -> str:
    """Put content in a rounded border with padding and margin."""
    return _render_box(content)


_KEY_NAMES = {
    "KEY_UP": "up",
    "KEY_DOWN": "down",
    "KEY_ENTER": "enter",
}


def _key_name(keystroke) -> str:
    if keystroke.is_sequence and keystroke.name in _KEY_NAMES:
        return _KEY_NAMES[keystroke.name]
    text = str(keystroke)
    if text == "\x03":
        return "ctrl+c"
    if text in ("\r", "\n"):
        return "enter"
    return text


def run(render_service: RenderService) -> None:
    """Run the interactive interface until the user quits."""
    from blessed import Terminal

    term = Terminal()
    border = term.color_rgb(*_BORDER_RGB)

    def paint(text: str) -> str:
        return border(text)

    model = Model(render_service)
    with term.fullscreen(), term.cbreak(), term.hidden_cursor():
        dirty = True
        try:
            while True:
                if dirty:
                    screen = _render_box(model.content(), paint)
                    print(term.home + term.clear + screen, end="", flush=True)
                dirty = False
                keystroke = term.inkey(timeout=0.1)
                while model.wait_for_update(0):
                    dirty = True
                if keystroke:
                    if model.handle_key(_key_name(keystroke)):
                        break
                    dirty = True
        except KeyboardInterrupt:
            pass