import threading

import pytest

from responsys import ResponsysClient
from responsys.messages import LoginResponse, ServiceResponse
from responsys.transport import Transport


class RecordingTransport(Transport):
    """Transport spy: records every call and answers from canned tables."""

    def __init__(self, token="SESSION-1"):
        self.token = token
        self.calls = []
        self.faults = {}
        self.responses = {}
        self.delays = {}
        self._release = threading.Event()

    @property
    def operations(self):
        return [op for op, _, _ in self.calls]

    def requests_for(self, operation):
        return [req for op, req, _ in self.calls if op == operation]

    def call(self, operation, request, context):
        self.calls.append((operation, request, context))
        delay = self.delays.get(operation)
        if delay:
            # Ends early once the test is torn down
            self._release.wait(delay)
        fault = self.faults.get(operation)
        if fault is not None:
            raise fault
        if operation == "login":
            return LoginResponse(session_id=self.token)
        return self.responses.get(operation, ServiceResponse(result=operation))

    def finish(self):
        self._release.set()


@pytest.fixture
def transport():
    t = RecordingTransport()
    yield t
    t.finish()


@pytest.fixture
def client(transport):
    return ResponsysClient("user@example.com", "s3cret", transport=transport, timeout=2.0)
