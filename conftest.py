# Ensure project root is on sys.path so 'tirc' is importable when running pytest from
# environments that don't automatically include it.
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).parent.resolve()
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def reload_event_templates_after_test():
    """Restore the packaged event templates if a test pointed elsewhere."""
    yield
    from tirc.logs.event_catalog import reload_event_templates

    reload_event_templates()
