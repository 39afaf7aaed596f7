import json

import pytest
from django.contrib.sessions.backends.db import SessionStore

from portal.api import ApiClient


class FakeApi:
    """ApiClient.request yerine geçer; (method, path) → yanıt veya istisna."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method, path, result=None):
        self.routes[(method, path)] = result
        return self

    def __call__(self, client, method, path, *, params=None, json=None):
        self.calls.append({"method": method, "path": path, "params": params, "json": json, "token": client.token})
        result = self.routes.get((method, path))
        if isinstance(result, Exception):
            raise result
        if callable(result):
            return result(params=params, json=json)
        return result

    def called(self, method, path):
        return [c for c in self.calls if c["method"] == method and c["path"] == path]


@pytest.fixture
def api(monkeypatch):
    fake = FakeApi()

    def request(self, method, path, *, params=None, json=None):
        return fake(self, method, path, params=params, json=json)

    monkeypatch.setattr(ApiClient, "request", request)
    return fake


@pytest.fixture
def login_as(client):
    def _login(*roles, email="ayse@example.com", token="tok-123"):
        session = client.session
        session["token"] = token
        session["email"] = email
        session["roles"] = json.dumps(list(roles))
        session.save()
        return client
    return _login


@pytest.fixture
def session_request(rf):
    request = rf.get("/")
    request.session = SessionStore()
    return request
