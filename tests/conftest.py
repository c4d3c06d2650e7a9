from pathlib import Path

import pytest
import yaml


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str):
    with open(FIXTURES_DIR / name, "r", encoding="utf-8") as stream:
        return yaml.safe_load(stream)


@pytest.fixture()
def weather_document():
    return load_fixture("weather.yaml")


@pytest.fixture()
def broken_document():
    return load_fixture("broken_members.yaml")


@pytest.fixture()
def ref():
    """Build a reference/member node targeting *target*."""
    def _ref(target: str = "ns#String", **extra):
        node = {"target": target}
        node.update(extra)
        return node

    return _ref
