"""pytest configuration and fixtures for pyqt-formsession tests."""

import os
from dataclasses import dataclass, field
from typing import Annotated, List

import pytest
from pydantic import Field

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt6.QtWidgets import QApplication  # noqa: E402


@dataclass
class Address:
    city: Annotated[str, Field(min_length=1)] = "Paris"
    zip_code: Annotated[str, Field(pattern=r"^\d{5}$")] = "75001"


@dataclass
class Person:
    name: Annotated[str, Field(min_length=1)] = ""
    age: Annotated[int, Field(ge=0, le=120)] = 0
    email: str = ""
    address: Address = field(default_factory=Address)
    tags: List[str] = field(default_factory=list)


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture
def person():
    return Person(name="Ada", age=36, email="ada@example.com")
