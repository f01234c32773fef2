"""Library code reports through logging only."""
import ast
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[2]
SOURCES = sorted((ROOT_DIR / "playlist_curator").rglob("*.py")) + [ROOT_DIR / "main_app.py"]


def _tree(path):
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def _calls(tree, name):
    return [
        node.lineno for node in ast.walk(tree)
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Name) and node.func.id == name
    ]


@pytest.mark.parametrize("path", SOURCES, ids=lambda p: p.relative_to(ROOT_DIR).as_posix())
def test_no_print_calls(path):
    assert _calls(_tree(path), "print") == []


@pytest.mark.parametrize("path", SOURCES, ids=lambda p: p.relative_to(ROOT_DIR).as_posix())
def test_loggers_are_module_scoped(path):
    """Any module that logs owns a module-level logger; nothing logs through the root."""
    source = path.read_text(encoding="utf-8")
    tree = _tree(path)
    root_calls = [
        node.lineno for node in ast.walk(tree)
        if isinstance(node, ast.Call)
        and isinstance(node.func, ast.Attribute)
        and isinstance(node.func.value, ast.Name)
        and node.func.value.id == "logging"
        and node.func.attr in ("debug", "info", "warning", "error", "exception")
    ]
    assert root_calls == []
    if "logger." in source and path.name != "logging_utils.py":
        assert "logger = logging.getLogger(" in source
