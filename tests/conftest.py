"""
Shared fixtures for the brokerage CRM tests.
"""

import os

# Tests never touch the on-disk database unless they ask for one.
os.environ["CRM_STORE_PROVIDER"] = "memory"

import pytest

from crm.core.gate import MutationGate
from crm.core.schema import Actor
from crm.store.index import InMemoryRecordStore
from crm.store.sqlite_store import SqliteRecordStore


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def sqlite_store(tmp_path):
    """File-backed store in a per-test temporary directory."""
    return SqliteRecordStore(str(tmp_path / "crm.db"))


@pytest.fixture
def gate(store):
    return MutationGate(store)


@pytest.fixture
def ledger(gate):
    return gate.ledger


@pytest.fixture
def admin():
    return Actor(id="1", name="Clayton Reynolds", role="admin")


@pytest.fixture
def employee():
    return Actor(id="2", name="Prathmesh Tare", role="employee")


@pytest.fixture
def inventory_item():
    """A complete, valid inventory record payload."""
    return {
        "type": "warehouse",
        "name": "Bhiwandi Logistics Park",
        "grade": "A",
        "developerOwnerName": "Reynolds Estates",
        "contactNo": "9820012345",
        "emailId": "leasing@reynolds.example.com",
        "city": "Mumbai",
        "location": "Bhiwandi",
        "floor": "Ground",
        "specification": "Grade A shed, 12m clear height",
        "status": "Available",
        "agreementPeriod": "5 years",
        "lockInPeriod": "3 years",
        "noOfCarParks": 20,
    }


@pytest.fixture
def project():
    """A complete, valid project master payload."""
    return {
        "type": "corporate_building",
        "name": "One BKC",
        "grade": "A",
        "developerOwnerName": "Bandra Developers",
        "contactNo": "9820054321",
        "emailId": "projects@bandra.example.com",
        "city": "Mumbai",
        "location": "BKC",
        "rentPerSqft": 250.0,
        "camPerSqft": 18.5,
        "status": "Active",
    }
