"""Pytest configuration and shared fixtures for the mdfmt test suite.

This module provides shared fixtures, test configuration, and utilities
that are used across the entire test suite.
"""

import logging
import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample Markdown documents."""
    return FIXTURES_DIR


@pytest.fixture
def sample_markdown() -> str:
    """Provide a small unformatted document used across multiple tests.

    Returns
    -------
    str
        Markdown with non-canonical markers, spacing and numbering.

    """
    return """# Sample Document
Some *emphasis* and __strong__ text with `inline code`.
## Section 2
* Item 1
* Item 2
    * Nested item

3. First
7. Second

```python
def hello_world():
    print("Hello, World!")
```
"""


@pytest.fixture
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside an empty directory with no mdfmt environment.

    Config discovery walks up from the working directory and falls back to
    the home directory, so both are pointed at the temporary directory.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
    for name in list(os.environ):
        if name.startswith("MDFMT_"):
            monkeypatch.delenv(name, raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs handlers on the mdfmt logger; remove them after each test."""
    package_logger = logging.getLogger("mdfmt")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    for handler in package_logger.handlers:
        if handler not in handlers:
            handler.close()
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
