import httpx
import pytest

from fakes import FakeS3, SlackRecorder


@pytest.fixture
def fake_s3():
    return FakeS3()


@pytest.fixture
def slack():
    return SlackRecorder()


@pytest.fixture
def slack_http(slack):
    client = httpx.Client(transport=httpx.MockTransport(slack))
    yield client
    client.close()
