# tests/conftest.py

import os

import fakeredis
import pytest
import redis
from fastapi.testclient import TestClient

from todo_client.api import TaskApiClient
from todo_client.board import TaskBoard
from todo_service.config import Settings
from todo_service.context import ServerContext
from todo_service.main import create_app
from todo_service.store import InMemoryTaskStore, RedisTaskStore

from .fakes import FailingStore

FRONTEND = "https://todo.example.com"

# point at a disposable database to run against a real server instead of fakeredis
REDIS_URL = os.getenv("TEST_REDIS_URL")


def make_client(store, raise_server_exceptions: bool = True) -> TestClient:
    ctx = ServerContext(settings=Settings(frontend_origin=FRONTEND), store=store)
    return TestClient(create_app(ctx), raise_server_exceptions=raise_server_exceptions)


@pytest.fixture()
def redis_client():
    if REDIS_URL:
        client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    else:
        client = fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    client.flushdb()
    yield client
    if REDIS_URL:
        client.flushdb()
    client.close()


@pytest.fixture(params=["memory", "redis"])
def store(request):
    if request.param == "memory":
        return InMemoryTaskStore()
    return RedisTaskStore(request.getfixturevalue("redis_client"))


@pytest.fixture()
def client(store):
    with make_client(store) as c:
        yield c


@pytest.fixture()
def failing_client():
    with make_client(FailingStore()) as c:
        yield c


@pytest.fixture()
def api(client):
    return TaskApiClient(http=client)


@pytest.fixture()
def alerts():
    return []


@pytest.fixture()
def board(api, alerts):
    return TaskBoard(api, alert=alerts.append)
