import os

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def load_pyproject():
    with open(os.path.join(ROOT, "pyproject.toml"), "rb") as fh:
        return tomllib.load(fh)


def test_console_script_lives_inside_the_package():
    data = load_pyproject()
    target = data["project"]["scripts"]["coinmerge"]
    module, _, func = target.partition(":")
    assert module.startswith("coinmerge.")
    assert func == "main"
    assert os.path.exists(os.path.join(ROOT, "src", *module.split(".")) + ".py")


def test_no_top_level_modules_are_installed():
    data = load_pyproject()
    assert "py-modules" not in data["tool"]["setuptools"]
    assert data["tool"]["setuptools"]["packages"]["find"]["include"] == ["coinmerge*"]
