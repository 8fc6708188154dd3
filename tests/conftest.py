"""Shared fixtures for the productflow test suite."""

import io
from collections import deque

import pytest
from rich.console import Console
from rich.prompt import Confirm, Prompt

from productflow.backend import MemoryBackend
from productflow.catalog import CatalogService


class ScriptedPrompts:
    """Answers rich prompts from a queue instead of stdin."""

    def __init__(self):
        self.answers = deque()
        self.asked = []

    def queue(self, *answers):
        self.answers.extend(answers)

    def ask(self, prompt="", **kwargs):
        self.asked.append(str(prompt))
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        answer = self.answers.popleft()
        # An empty answer takes the default, like pressing Enter
        if answer == "" and kwargs.get("default") not in (None, ""):
            return kwargs["default"]
        return answer

    @property
    def remaining(self):
        return list(self.answers)


@pytest.fixture
def prompts(monkeypatch):
    """Replace Prompt.ask and Confirm.ask with a scripted queue."""
    scripted = ScriptedPrompts()
    monkeypatch.setattr(Prompt, "ask", scripted.ask)
    monkeypatch.setattr(Confirm, "ask", scripted.ask)
    return scripted


@pytest.fixture
def console():
    """Console writing to a string buffer."""
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def service(backend):
    return CatalogService(backend)


@pytest.fixture
def product_line(service):
    """A brand with one product line; returns the shared data a first step would produce."""
    from productflow.catalog import BrandInput, ProductLineInput

    brand_id = service.create_brand(BrandInput(name="Acme Pet"))
    line_id = service.create_product_line(brand_id, ProductLineInput(name="Grain Free"))
    return {"brand_id": brand_id, "product_line_id": line_id, "is_new_product_line": True}
