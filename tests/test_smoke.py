"""
Smoke tests to verify basic infrastructure setup.
Run these after fresh environment setup to confirm everything works.
"""

import sys
import importlib
from pathlib import Path
import pytest

ROOT = Path(__file__).resolve().parent.parent

def test_python_version():
    """Test Python version meets requirements."""
    assert sys.version_info >= (3, 9), f"Python 3.9+ required, got {sys.version}"

def test_package_imports():
    """Test that configured packages can be imported."""
    packages = [
        "numpy",
        "pytest",
        "psutil",
    ]

    failed_imports = []
    for package in packages:
        try:
            importlib.import_module(package)
        except ImportError as e:
            failed_imports.append(f"{package}: {e}")

    if failed_imports:
        pytest.fail(f"Failed to import packages: {failed_imports}")

def test_project_structure():
    """Test that required directories exist."""
    required_dirs = [
        "delve",
        "delve/core",
        "delve/generation",
        "delve/regions",
        "delve/visibility",
        "delve/routing",
        "tests",
        "scripts",
    ]

    missing_dirs = []
    for dir_name in required_dirs:
        if not (ROOT / dir_name).is_dir():
            missing_dirs.append(dir_name)

    if missing_dirs:
        pytest.fail(f"Missing required directories: {missing_dirs}")

def test_source_package():
    """Test that delve is importable and exposes its public API."""
    try:
        import delve
    except ImportError as e:
        pytest.fail(f"Cannot import delve package: {e}")

    assert delve.__version__
    for name in delve.__all__:
        assert hasattr(delve, name), f"delve.{name} missing"

def test_tool_config_files():
    """Test that tool configuration files exist."""
    configs = [
        "pyproject.toml",
        "DESIGN.md",
    ]

    missing_configs = []
    for config in configs:
        if not (ROOT / config).exists():
            missing_configs.append(config)

    if missing_configs:
        pytest.fail(f"Missing configuration files: {missing_configs}")

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
