from __future__ import annotations

import logging

import pytest

from jobfuture import Client
from jobfuture.clocks import StepClock
from jobfuture.stores import LocalStore


def pytest_configure() -> None:
    logging.basicConfig(level=logging.ERROR)  # set log levels very high for tests


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def store(clock: StepClock) -> LocalStore:
    return LocalStore(clock=clock)


@pytest.fixture
def client(store: LocalStore, clock: StepClock) -> Client:
    return Client(store=store, clock=clock)
