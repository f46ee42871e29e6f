"""
Shared pytest fixtures for the contact book tests.
"""
import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

# Make the top-level module importable without installing the project
sys.path.insert(0, str(Path(__file__).parent.parent))

import contact_book
from contact_book import Contact, ContactBook


class ScriptedConsole(Console):
    """Console that answers prompts from a list and records everything printed."""

    def __init__(self):
        self.buffer = io.StringIO()
        super().__init__(file=self.buffer, width=200, color_system=None)
        self.answers = []
        self.prompts = []

    def input(self, prompt="", **kwargs):
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError
        return self.answers.pop(0)

    @property
    def output(self):
        return self.buffer.getvalue()


@pytest.fixture
def term(monkeypatch):
    """Replace the module console; set `term.answers` to script the user."""
    fake = ScriptedConsole()
    monkeypatch.setattr(contact_book, "console", fake)
    return fake


@pytest.fixture
def data_path(tmp_path):
    return str(tmp_path / "contacts.json")


@pytest.fixture
def sample_book():
    return ContactBook([
        Contact("Beto", "10/03", "555-0101", "beto@example.com"),
        Contact("Ana", "05/02", "555-0100", "ana@example.com"),
        Contact("carla", "21/12", "555-0102", "carla@example.com"),
    ])
