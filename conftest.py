import os
import sys
from pathlib import Path

import pytest

# Fail fast on interpreters older than requires-python
if sys.version_info < (3, 10):
    print(
        f"ERROR: dune-runner requires Python 3.10+ (found {sys.version.split()[0]}).",
        file=sys.stderr,
    )
    sys.exit(1)


ROOT_DIR = Path(__file__).parent.absolute()
src_dir = ROOT_DIR / "src"

# Lets the suite run from a plain checkout without `pip install -e .`.
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def _isolate_dune_env(monkeypatch):
    """Keep host DUNE_*/OTEL settings from leaking into tests."""
    for name in list(os.environ):
        if name.startswith("DUNE_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OTEL_DISABLE_EXPORTER", "true")


def pytest_collection_modifyitems(config, items):
    """Skip live API tests unless RUN_INTEGRATION_TESTS=1."""
    run_integration = os.getenv("RUN_INTEGRATION_TESTS", "0") == "1"

    skip_integration = pytest.mark.skip(
        reason="Skipping integration tests (set RUN_INTEGRATION_TESTS=1 to run)"
    )
    for item in items:
        is_integration_path = f"{os.sep}tests{os.sep}integration{os.sep}" in str(item.path)
        if (is_integration_path or item.get_closest_marker("integration")) and not run_integration:
            item.add_marker(skip_integration)
