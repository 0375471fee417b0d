"""Pytest configuration."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from docshell.layout.model import Group, Split  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def two_tab_root():
    return Group(id="1", tabs=("a.md", "b.md"), active_path="a.md")


@pytest.fixture
def nested_tree():
    """horizontal[ g1, vertical[ g2, g3 ], g4 ]"""
    return Split(
        id="s-root",
        direction="horizontal",
        children=(
            Group(id="g1", tabs=("a.md",), active_path="a.md"),
            Split(
                id="s-inner",
                direction="vertical",
                children=(
                    Group(id="g2", tabs=("b.md", "c.md"), active_path="c.md"),
                    Group(id="g3"),
                ),
                sizes=(1, 1),
            ),
            Group(id="g4", tabs=("d.md",), active_path=None, is_read_only=True),
        ),
        sizes=(0.2, 0.5, 0.3),
    )
