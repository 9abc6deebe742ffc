"""Pytest fixtures for pagescan tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterator

import pytest
import structlog

from pagescan.analysis import PageAnalyzer
from pagescan.dom import SoupDocument


@pytest.fixture
def make_document() -> Callable[..., SoupDocument]:
    """Factory parsing an HTML string into a SoupDocument."""

    def _make(html: str, url: str = "https://example.com/") -> SoupDocument:
        return SoupDocument(html, url=url)

    return _make


@pytest.fixture
def analyzer() -> PageAnalyzer:
    return PageAnalyzer()


@pytest.fixture
def login_page_html() -> str:
    """Login page with a form, a search box, buttons and links."""
    return '''
<!DOCTYPE html>
<html lang="en">
<head><title>Sign in - Example</title></head>
<body>
  <header>
    <input type="search" name="q" placeholder="Search products">
    <a href="/">Home</a>
    <a href="javascript:void(0)">Menu</a>
    <a href="/help" style="display: none">Hidden help</a>
  </header>
  <form id="login-form" action="/session" method="POST">
    <label for="email">Email:</label>
    <input type="email" id="email" name="email" required>
    <label>Password <input type="password" name="password" data-testid="password-input"></label>
    <input type="hidden" name="csrf" value="token">
    <input type="text" name="nickname" style="display:none">
    <button type="submit" id="login-submit">Log in</button>
  </form>
  <div role="button" class="forgot-link">Forgot password?</div>
  <a href="/signup">Create an account</a>
</body>
</html>
'''


@pytest.fixture
def login_page_file(tmp_path: Path, login_page_html: str) -> Path:
    path = tmp_path / "login.html"
    path.write_text(login_page_html, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()
