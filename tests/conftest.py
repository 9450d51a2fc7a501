import pytest

from shiftpay.storage import DataStore


@pytest.fixture
def store(tmp_path):
    return DataStore(tmp_path / "store.json")
