# tests/test_api.py
"""
Integration Tests for the notification dashboard HTTP API.

Focus
-----
These tests verify the HTTP contract over a real store in a temp directory.
Replay and activation side effects go through recording fakes, so no
process is ever started.

Scenarios
---------
1. **Health Check**: Verify service is up and reports the package version.
2. **Listing**: Ordering, limit and include_dismissed.
3. **Mutations**: dismiss / dismiss-all / replay / activate.
4. **Error Handling**: 404 for unknown ids.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from utts import __version__ as PKG_VERSION
from utts.api.app import create_app
from utts.notifications import Notifications, NotificationsConfig, NotificationStore


class _Calls:
    def __init__(self) -> None:
        self.launched: list[list[str]] = []
        self.ran: list[Any] = []

    def launch(self, argv: Any) -> bool:
        self.launched.append(list(argv))
        return True

    def run(self, args: Any, **kwargs: Any) -> int:
        self.ran.append(args)
        return 0


@pytest.fixture  # type: ignore[misc]
def calls() -> _Calls:
    return _Calls()


@pytest.fixture  # type: ignore[misc]
def service(store: NotificationStore, calls: _Calls) -> Notifications:
    return Notifications(NotificationsConfig(store=store, launcher=calls.launch, runner=calls.run))


@pytest.fixture  # type: ignore[misc]
def client(service: Notifications) -> Generator[TestClient, None, None]:
    """Fresh app per test, wired to the temp-dir façade."""
    with TestClient(create_app(service)) as c:
        yield c


def test_health_check(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": PKG_VERSION}


def test_list_returns_most_recent_first(client: TestClient, service: Notifications) -> None:
    service.log("one")
    service.log("two")

    response = client.get("/notifications")

    assert response.status_code == 200
    payload = response.json()
    assert {row["text"] for row in payload} == {"one", "two"}
    assert set(payload[0].keys()) >= {"id", "text", "timestamp", "metadata", "dismissed_at"}

    limited = client.get("/notifications", params={"limit": 1}).json()
    assert len(limited) == 1


def test_get_one_and_404(client: TestClient, service: Notifications) -> None:
    n = service.log("lookup")

    assert client.get(f"/notifications/{n.id}").json()["text"] == "lookup"

    missing = client.get("/notifications/ghost")
    assert missing.status_code == 404
    assert "ghost" in missing.json()["detail"]


def test_dismiss_hides_from_default_listing(client: TestClient, service: Notifications) -> None:
    n = service.log("bye")

    response = client.post(f"/notifications/{n.id}/dismiss")
    assert response.status_code == 200
    assert response.json()["dismissed_at"] is not None

    assert client.get("/notifications").json() == []
    assert len(client.get("/notifications", params={"include_dismissed": True}).json()) == 1
    assert client.post("/notifications/ghost/dismiss").status_code == 404


def test_dismiss_all(client: TestClient, service: Notifications) -> None:
    service.log("a")
    service.log("b")

    assert client.post("/notifications/dismiss-all").status_code == 204
    assert client.get("/notifications").json() == []


def test_replay_is_accepted_and_launched(
    client: TestClient, service: Notifications, calls: _Calls
) -> None:
    n = service.log("again", caller="proj: x")

    response = client.post(f"/notifications/{n.id}/replay")

    assert response.status_code == 202
    assert calls.launched == [["utts", "again", "--caller", "replay: proj: x"]]
    assert client.post("/notifications/ghost/replay").status_code == 404


def test_activate_runs_metadata_action(
    client: TestClient, service: Notifications, calls: _Calls
) -> None:
    n = service.log("open", metadata={"action": {"type": "url", "url": "https://x"}})

    response = client.post(f"/notifications/{n.id}/activate")

    assert response.status_code == 200
    assert calls.ran == [["open", "https://x"]]
