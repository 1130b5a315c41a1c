import pytest

from meeting_assistant.tests.fakes import FakeRecallClient


@pytest.fixture
def fake_client():
    return FakeRecallClient()
