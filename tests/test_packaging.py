from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_installed_modules_exist_and_exclude_main_script():
    with PYPROJECT.open("rb") as handle:
        config = tomllib.load(handle)

    modules = config["tool"]["setuptools"]["py-modules"]
    code_dir = PYPROJECT.parent / "code"

    assert "main" not in modules
    assert all((code_dir / f"{module}.py").is_file() for module in modules)
    for target in config["project"]["scripts"].values():
        assert target.split(":")[0] in modules
