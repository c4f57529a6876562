# type: ignore
import pytest

from sm.loader.program import demo_program

import unit_utils


@pytest.fixture
def with_ports():
    yield unit_utils.make_ports()


@pytest.fixture
def with_settings():
    yield unit_utils.small_settings()


@pytest.fixture
def with_demo():
    yield demo_program()
