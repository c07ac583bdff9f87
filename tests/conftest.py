import pathlib
import shutil

import pytest

from paraxref.tree import RenderedTree


def pytest_addoption(parser):
    """Register custom command line options.

    Declaring them here (root tests conftest) ensures pytest recognizes the options before parsing.
    """
    parser.addoption(
        "--with-pandoc",
        action="store_true",
        default=False,
        help="Run tests that convert LaTeX with a local pandoc installation",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--with-pandoc") and shutil.which("pandoc") is not None:
        return
    skip_pandoc = pytest.mark.skip(reason="needs --with-pandoc and a pandoc executable")
    for item in items:
        if "pandoc" in item.keywords:
            item.add_marker(skip_pandoc)


def pytest_configure(config):
    config.addinivalue_line("markers", "pandoc: test converts LaTeX with pandoc")


@pytest.fixture
def top_dir() -> pathlib.Path:
    return pathlib.Path(__file__).resolve().absolute().parent


@pytest.fixture
def files_dir(top_dir):
    return (top_dir / ".." / "files").resolve().absolute()


@pytest.fixture
def doc_dir(files_dir) -> pathlib.Path:
    return files_dir / "doc_crossref"


@pytest.fixture
def source_text(doc_dir) -> str:
    return (doc_dir / "main.tex").read_text(encoding="utf-8")


@pytest.fixture
def rendered_html(doc_dir) -> str:
    return (doc_dir / "rendered.html").read_text(encoding="utf-8")


@pytest.fixture
def rendered_tree(rendered_html) -> RenderedTree:
    return RenderedTree.from_html(rendered_html)
