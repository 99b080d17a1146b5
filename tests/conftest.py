# tests/conftest.py
import os
import sys
import asyncio
import json

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.abspath("."))

# Keep the application engine off the filesystem during tests.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from design_crm.auth import create_session_token
from design_crm.database import Base, get_db
from design_crm.dispatch import get_email_sender
from design_crm import models
from main import app


# DB (SQLite in-memory for tests)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def prepare_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(prepare_database):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


# One event loop for the WHOLE pytest session
@pytest.fixture(scope="session")
def session_loop():
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    yield loop
    loop.close()


# Simple ASGI response/client
class SimpleResponse:
    def __init__(
        self, status_code: int, body: bytes, headers: list[tuple[bytes, bytes]]
    ):
        self.status_code = status_code
        self._body = body
        self.headers = {k.decode(): v.decode() for k, v in headers}

    @property
    def content(self) -> bytes:
        return self._body

    def json(self):
        return json.loads(self._body.decode())


class SimpleClient:
    """
    Drives the ASGI app directly on one shared event loop.

    Default headers (e.g. Authorization) are sent with every request and
    may be overridden per call.
    """

    def __init__(self, app, loop, headers=None):
        self.app = app
        self.loop = loop
        self.headers = dict(headers or {})

    def request(self, method: str, path: str, json_body=None, headers=None):
        headers = {**self.headers, **(headers or {})}
        body_bytes = b""

        if json_body is not None:
            body_bytes = json.dumps(json_body).encode()
            headers.setdefault("content-type", "application/json")

        path, _, query = path.partition("?")
        raw_headers = [(k.lower().encode(), v.encode()) for k, v in headers.items()]
        scope = {
            "type": "http",
            "method": method.upper(),
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "scheme": "http",
            "server": ("testserver", 80),
            "headers": raw_headers,
            "query_string": query.encode(),
            "client": ("testclient", 5000),
        }

        async def receive():
            nonlocal body_bytes
            chunk, body_bytes = body_bytes, b""
            return {"type": "http.request", "body": chunk, "more_body": False}

        response_body = bytearray()
        response_status = 500
        response_headers: list[tuple[bytes, bytes]] = []

        async def send(message):
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = message.get("headers", [])
            elif message["type"] == "http.response.body":
                response_body.extend(message.get("body", b""))

        # ensure the loop is the current one
        asyncio.set_event_loop(self.loop)
        self.loop.run_until_complete(self.app(scope, receive, send))
        return SimpleResponse(response_status, bytes(response_body), response_headers)

    def get(self, path: str, headers=None):
        return self.request("GET", path, headers=headers)

    def post(self, path: str, json=None, headers=None):
        return self.request("POST", path, json_body=json, headers=headers)

    def put(self, path: str, json=None, headers=None):
        return self.request("PUT", path, json_body=json, headers=headers)

    def delete(self, path: str, headers=None):
        return self.request("DELETE", path, headers=headers)


class RecordingSender:
    """Email sender stand-in that records payloads and returns ``result``."""

    def __init__(self, result: bool = True):
        self.result = result
        self.sent = []

    async def send(self, payload):
        self.sent.append(payload)
        return self.result


SESSION_CLAIMS = {
    "sub": "user-1",
    "email": "me@example.com",
    "first_name": "Sam",
    "last_name": "Rivera",
    "profile_image_url": "https://example.com/sam.png",
}


@pytest.fixture()
def session_token():
    return create_session_token(SESSION_CLAIMS)


@pytest.fixture()
def email_sender():
    return RecordingSender()


# Anonymous client: override DB and email dependencies per test
@pytest.fixture()
def anon_client(db_session, session_loop, email_sender):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender

    try:
        yield SimpleClient(app, loop=session_loop)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(anon_client, session_token):
    anon_client.headers["Authorization"] = f"Bearer {session_token}"
    return anon_client


@pytest.fixture()
def make_contact(db_session):
    def _make(**overrides):
        data = {
            "first_name": "Ada",
            "last_name": "Lin",
            "role": "Product Designer",
            "company": "Acme",
        }
        data.update(overrides)
        contact = models.Contact(**data)
        db_session.add(contact)
        db_session.commit()
        db_session.refresh(contact)
        return contact

    return _make


@pytest.fixture()
def make_list(db_session):
    def _make(name="Top Picks", description=None, contacts=()):
        contact_list = models.ContactList(name=name, description=description)
        db_session.add(contact_list)
        db_session.commit()
        for contact in contacts:
            db_session.add(
                models.ListContact(list_id=contact_list.id, contact_id=contact.id)
            )
        db_session.commit()
        db_session.refresh(contact_list)
        return contact_list

    return _make
