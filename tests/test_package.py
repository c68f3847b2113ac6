import importlib
import importlib.metadata

import lexdiff


def test_version_without_installed_metadata(monkeypatch):
    def missing(name):
        raise importlib.metadata.PackageNotFoundError(name)

    monkeypatch.setattr(importlib.metadata, "version", missing)
    try:
        importlib.reload(lexdiff)
        assert lexdiff.__version__ == "0.0.0-dev"
    finally:
        monkeypatch.undo()
        importlib.reload(lexdiff)
