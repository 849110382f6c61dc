import os

import pytest


@pytest.fixture(autouse=True)
def isolated_storage_env(monkeypatch):
    """Keep host SUPABASE_* / STORAGE_* variables out of Settings()."""
    for name in list(os.environ):
        if name.upper().startswith(("SUPABASE_", "STORAGE_", "SIGNED_URL_", "STREAM_")):
            monkeypatch.delenv(name, raising=False)
    yield
