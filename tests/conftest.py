import pytest

from factories import FakeOrderStore, build_order


@pytest.fixture
def make_order():
    return build_order


@pytest.fixture
def order():
    return build_order()


@pytest.fixture
def store(order):
    return FakeOrderStore(order)
