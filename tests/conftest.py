import os
import tempfile

import pytest

# Keep test runs from writing into the project's log directory.
os.environ.setdefault("LINGUA_LOG_DIR", tempfile.mkdtemp(prefix="linguamaster-logs-"))


def pytest_configure(config: pytest.Config) -> None:
    for marker, description in (
        ("text", "tokenizer and selection resolution"),
        ("lookup", "lookup coordination, detection and providers"),
        ("config", "settings loading"),
        ("audio", "speech synthesis backends"),
        ("webapi", "HTTP routes"),
    ):
        config.addinivalue_line("markers", f"{marker}: {description}")


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    from linguamaster.config import reset_settings_cache

    reset_settings_cache()
    yield
    reset_settings_cache()
