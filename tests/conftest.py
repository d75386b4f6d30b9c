import pytest

from finance_core.gateway import PersistenceGateway
from finance_core.ledger import Ledger
from finance_core.storage import JSONStorage
from finance_core.tracker import FinanceTracker


@pytest.fixture
def ledger():
    return Ledger()


@pytest.fixture
def storage(tmp_path):
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def gateway(storage):
    return PersistenceGateway(storage)


@pytest.fixture
def tracker(gateway):
    return FinanceTracker(gateway)
