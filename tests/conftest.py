from __future__ import annotations

import pytest

SETTINGS_ENV_KEYS = (
    "COMMISSION_PCT",
    "COLLECTION_PCT",
    "GST_PCT",
    "INCLUDE_SHIPPING_IN_COLLECTION",
    "DEFAULT_ZONE",
    "DEFAULT_ITEM",
    "CAP_TOLERANCE",
    "MAX_PRICE",
)


@pytest.fixture()
def clean_env(monkeypatch):
    # setenv first so monkeypatch also undoes keys written by load_env_file
    for key in SETTINGS_ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch
