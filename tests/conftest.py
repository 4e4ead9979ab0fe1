"""Shared fixtures for leadform tests."""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from leadform.store import FormStateStore
from leadform.types import FormField

WEBHOOK_URL = "https://hooks.example.com/intake"


def fill_valid_form(store: FormStateStore) -> FormStateStore:
    """Fill ``store`` with the canonical valid answers."""
    store.update(FormField.EMPLOYEE_COUNT, "10")
    store.update(FormField.COST_SELECTION, "R$ 2.222,62")
    store.toggle_role("Atendimento ao cliente", True)
    store.update(FormField.REPETITIVE_TIME_BAND, "Quase nada")
    store.update(FormField.AVERAGE_TICKET, "5000")
    store.update(FormField.PHONE, "11999998888")
    return store


class RecordingWebhook:
    """httpx handler recording every request and answering with a fixed status."""

    def __init__(self, status_code: int = 200):
        self.status_code = status_code
        self.requests: List[httpx.Request] = []

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content.decode("utf-8")) for request in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"ok": True})


def mock_http_client(handler: Callable) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def store() -> FormStateStore:
    return FormStateStore()


@pytest.fixture
def valid_store() -> FormStateStore:
    return fill_valid_form(FormStateStore())


@pytest.fixture
def webhook() -> RecordingWebhook:
    return RecordingWebhook()
