import pytest

from tests.fakes import FakeBot


@pytest.fixture
def fake_bot():
    return FakeBot()
