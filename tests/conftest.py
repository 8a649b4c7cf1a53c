import shutil
from pathlib import Path
import tempfile
import pytest


@pytest.fixture(scope="session", autouse=True)
def isolate_home_config():
    """Temporarily move any existing user-level trac_digest config out of the way.

    Tests expect the built-in defaults unless they point the loader at a
    config directory of their own. This fixture moves the file aside for
    the duration of the test session and restores it afterwards.
    """
    config_path = Path.home() / ".tracdigest" / ".tracdigest_config.json"
    backup_dir = None
    moved = False
    if config_path.exists():
        backup_dir = Path(tempfile.mkdtemp(prefix="tracdigest_backup_"))
        shutil.move(str(config_path), str(backup_dir / config_path.name))
        moved = True

    try:
        yield
    finally:
        if moved and backup_dir is not None:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(backup_dir / config_path.name), str(config_path))
            shutil.rmtree(str(backup_dir), ignore_errors=True)
