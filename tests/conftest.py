import shutil
from pathlib import Path
import tempfile
import pytest


USER_FILES = ("config.json", "history.json")


@pytest.fixture(scope="session", autouse=True)
def isolate_home_config():
    """Temporarily move any existing user-level smart_commit files out of the way.

    Some tests expect no user-level config or history to exist. This fixture
    moves the files aside for the duration of the test session and restores
    them afterwards.
    """
    config_dir = Path.home() / ".smart_commit"
    backup_dir = Path(tempfile.mkdtemp(prefix="smart_commit_backup_"))
    moved = []
    for name in USER_FILES:
        path = config_dir / name
        if path.exists():
            shutil.move(str(path), str(backup_dir / name))
            moved.append(name)

    try:
        yield
    finally:
        # restore
        for name in moved:
            config_dir.mkdir(parents=True, exist_ok=True)
            shutil.move(str(backup_dir / name), str(config_dir / name))
        shutil.rmtree(str(backup_dir), ignore_errors=True)
