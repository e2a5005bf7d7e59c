import os

import pytest

os.environ.setdefault("APP_ENV", "testing")

from fakes import FakeScheduler  # noqa: E402


@pytest.fixture
def scheduler():
    return FakeScheduler()
