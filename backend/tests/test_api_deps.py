"""API dependency tests."""

from zoneinfo import ZoneInfo

import pytest
from fastapi import HTTPException

from gravity.api.deps import get_current_user_id, get_db, get_search_service, get_settings


def test_get_settings_uses_data_dir(app_env):
    """get_settings returns settings rooted at GRAVITY_DATA_DIR."""
    settings = get_settings()

    assert settings.data_dir == app_env["data_dir"]
    assert settings.db_path == app_env["db_path"]


def test_get_db_is_cached_and_migrated(app_env):
    db = get_db()

    assert get_db() is db
    assert app_env["db_path"].exists()
    db.execute("SELECT COUNT(*) FROM notes").fetchone()


def test_get_db_recreates_connection_when_file_deleted(app_env):
    """get_db should recreate connection if database file was deleted."""
    db1 = get_db()
    db1.close()
    app_env["db_path"].unlink()

    db2 = get_db()

    assert db2 is not db1
    assert app_env["db_path"].exists()
    db2.execute("SELECT COUNT(*) FROM notes").fetchone()


def test_current_user_id_strips_whitespace():
    assert get_current_user_id(" user-1 ") == "user-1"


@pytest.mark.parametrize("header", [None, "", "   "])
def test_current_user_id_missing(header):
    with pytest.raises(HTTPException) as exc_info:
        get_current_user_id(header)
    assert exc_info.value.status_code == 401


def test_search_service_uses_configured_timezone(app_env, store):
    (app_env["data_dir"] / "config.ini").write_text("[search]\ntimezone = Asia/Tokyo\n")

    service = get_search_service(store)

    assert service._clock().tzinfo is ZoneInfo("Asia/Tokyo")
