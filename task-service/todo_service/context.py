from __future__ import annotations

from dataclasses import dataclass, field

from fastapi import Request

from todo_service.config import Settings
from todo_service.store import InMemoryTaskStore, TaskStore, build_store


@dataclass
class ServerContext:
    """Everything a request handler needs; built once at startup."""

    settings: Settings = field(default_factory=Settings)
    store: TaskStore = field(default_factory=InMemoryTaskStore)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerContext":
        return cls(settings=settings, store=build_store(settings))


def get_context(request: Request) -> ServerContext:
    return request.app.state.context
