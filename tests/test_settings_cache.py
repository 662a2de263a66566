"""Settings cache behaviour against a real SQLite store."""
from datetime import datetime
import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from clinic_access import crud
from clinic_access.core.enums import ReloadStatus, ValueType, WriteResult
from clinic_access.core.exceptions import StoreUnavailable
from clinic_access.services.defaults import DEFAULT_SETTINGS


class TestSettingsReads:
    """Typed reads with default fallback."""

    def test_missing_key_returns_default(self, settings_cache):
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        assert settings_cache.get_string("ClinicName", "Fallback") == "Fallback"
        assert settings_cache.get_bool("EnableAuditLogs", True) is True
        assert settings_cache.get_datetime("LastUpdated") is None

    def test_set_then_get_int(self, settings_cache):
        """Empty store -> default, write, then the written value."""
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        assert settings_cache.set_int("ItemsPerPage", 25, "admin") == WriteResult.CREATED
        assert settings_cache.get_int("ItemsPerPage", 10) == 25

    def test_generic_get_dispatches_on_default_type(self, settings_cache):
        settings_cache.set_multiple({"Count": 7, "Flag": True, "Name": "Rosal"}, "admin")
        assert settings_cache.get("Count", 0) == 7
        assert settings_cache.get("Flag", False) is True
        assert settings_cache.get("Name", "") == "Rosal"
        assert settings_cache.get("Missing", 3) == 3

    def test_bool_values_are_written_lowercase(self, settings_cache):
        settings_cache.set_bool("EnableRememberMe", True, "admin")
        assert settings_cache.get_entry("EnableRememberMe").setting_value == "true"
        assert settings_cache.get_bool("EnableRememberMe", False) is True

    @pytest.mark.parametrize("raw", ["TRUE", "1", "yes", " on "])
    def test_truthy_words(self, settings_cache, raw):
        settings_cache.set("Flag", raw)
        assert settings_cache.get_bool("Flag", False) is True

    def test_malformed_values_fall_back_to_default(self, settings_cache):
        settings_cache.set_multiple(
            {"ItemsPerPage": "twenty", "EnableAuditLogs": "maybe", "LastUpdated": "yesterday"},
            "admin",
        )
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        assert settings_cache.get_bool("EnableAuditLogs", True) is True
        assert settings_cache.get_datetime("LastUpdated") is None

    def test_datetime_round_trip(self, settings_cache):
        stamp = datetime(2024, 3, 1, 8, 30)
        settings_cache.set_datetime("LastUpdated", stamp, "admin")
        assert settings_cache.get_datetime("LastUpdated") == stamp

    def test_keys_are_case_sensitive(self, settings_cache):
        settings_cache.set("ClinicName", "Rosal")
        assert settings_cache.get_string("clinicname", "none") == "none"

    def test_registered_defaults_without_caller_default(self, settings_cache):
        assert settings_cache.get_int("ItemsPerPage") == 10
        assert settings_cache.get_bool("EnableSoundNotifications") is True
        assert settings_cache.get_string("ClinicName") == "Rosal Medical Clinic"
        assert settings_cache.get("SessionTimeoutMinutes") == 30

    def test_caller_default_beats_registered_default(self, settings_cache):
        assert settings_cache.get_int("ItemsPerPage", 25) == 25
        assert settings_cache.get_string("ClinicName", "Fallback") == "Fallback"

    def test_unregistered_keys_fall_back_to_empty_values(self, settings_cache):
        assert settings_cache.get_int("NoSuchKey") == 0
        assert settings_cache.get_string("NoSuchKey") == ""
        assert settings_cache.get_bool("NoSuchKey") is False
        assert settings_cache.get("NoSuchKey") == ""
        # Registered as a string, so there is no integer default to parse.
        assert settings_cache.get_int("ClinicName") == 0

    def test_malformed_value_without_default_uses_registered_default(self, settings_cache):
        settings_cache.set("ItemsPerPage", "twenty", "admin")
        assert settings_cache.get_int("ItemsPerPage") == 10


class TestSettingsWrites:
    """Write-through semantics."""

    def test_new_key_defaults_to_general_string(self, settings_cache):
        settings_cache.set("Motto", "Care first", "admin")
        entry = settings_cache.get_entry("Motto")
        assert entry.category == "General"
        assert entry.setting_type == ValueType.STRING.value
        assert entry.modified_by == "admin"

    def test_set_twice_is_idempotent(self, settings_cache):
        assert settings_cache.set("Timezone", "Asia/Manila", "admin") == WriteResult.CREATED
        assert settings_cache.set("Timezone", "Asia/Manila", "admin") == WriteResult.UNCHANGED
        assert settings_cache.get_string("Timezone") == "Asia/Manila"
        assert len(settings_cache.get_all()) == 1

    def test_update_reports_updated(self, settings_cache):
        settings_cache.set("Timezone", "Asia/Manila", "admin")
        assert settings_cache.set("Timezone", "UTC", "root") == WriteResult.UPDATED
        assert settings_cache.get_entry("Timezone").modified_by == "root"

    def test_read_after_write_ignores_ttl(self, settings_cache, clock):
        settings_cache.set("ClinicName", "Old")
        assert settings_cache.get_string("ClinicName") == "Old"
        settings_cache.set("ClinicName", "New")
        # No time has passed; the write itself forces the reload.
        assert settings_cache.get_string("ClinicName") == "New"

    def test_set_multiple_invalidates_once(self, settings_cache, store):
        settings_cache.get_string("Anything")
        loads = store.loads
        results = settings_cache.set_multiple({"A": "1", "B": "2"}, "admin")
        assert results == {"A": WriteResult.CREATED, "B": WriteResult.CREATED}
        assert settings_cache.get_int("A") == 1
        assert settings_cache.get_int("B") == 2
        assert store.loads == loads + 1

    def test_write_failure_propagates(self, settings_cache, store):
        store.available = False
        with pytest.raises(StoreUnavailable):
            settings_cache.set("ClinicName", "Rosal", "admin")
        with pytest.raises(StoreUnavailable):
            settings_cache.set_multiple({"ClinicName": "Rosal"}, "admin")

    def test_set_multiple_is_all_or_nothing(self, settings_cache, monkeypatch):
        settings_cache.set("A", "old", "admin")
        calls = []
        upsert = crud.upsert_setting

        def fail_second(*args, **kwargs):
            calls.append(args[1])
            if len(calls) == 2:
                raise SQLAlchemyError("disk I/O error")
            return upsert(*args, **kwargs)

        monkeypatch.setattr(crud, "upsert_setting", fail_second)
        with pytest.raises(StoreUnavailable):
            settings_cache.set_multiple({"A": "new", "B": "x"}, "admin")
        monkeypatch.undo()

        settings_cache.refresh()
        assert settings_cache.get_string("A") == "old"
        assert settings_cache.get_entry("B") is None

    def test_none_is_stored_as_null(self, settings_cache):
        settings_cache.set("ClinicContactNumber", None, "admin")
        assert settings_cache.get_entry("ClinicContactNumber").setting_value is None
        assert settings_cache.get_string("ClinicContactNumber", "n/a") == "n/a"

    def test_reset_category_to_defaults(self, settings_cache):
        settings_cache.set_int("LowStockThreshold", 5, "admin")
        results = settings_cache.reset_category_to_defaults("Notification", "admin")
        assert set(results) == set(DEFAULT_SETTINGS["Notification"])
        assert results["LowStockThreshold"] == WriteResult.UPDATED
        assert settings_cache.get_int("LowStockThreshold") == 50
        assert settings_cache.get_string("AppointmentReminderRecipients") == "Doctor,Receptionist"
        entry = settings_cache.get_entry("ExpiryAlertDays")
        assert entry.category == "Notification"
        assert entry.setting_type == ValueType.INT.value

    def test_reset_unknown_category_writes_nothing(self, settings_cache):
        assert settings_cache.reset_category_to_defaults("Appearance", "admin") == {}
        assert settings_cache.get_all() == []

    def test_get_by_category_and_last_modified(self, settings_cache):
        assert settings_cache.get_last_modified() is None
        settings_cache.reset_category_to_defaults("Database", "admin")
        keys = [entry.setting_key for entry in settings_cache.get_by_category("Database")]
        assert keys == sorted(DEFAULT_SETTINGS["Database"])
        assert settings_cache.get_last_modified() is not None

    def test_user_settings_are_namespaced(self, settings_cache):
        settings_cache.save_user_setting(7, "Theme", "dark", "nurse")
        assert settings_cache.get_user_setting(7, "Theme", "light") == "dark"
        assert settings_cache.get_user_setting(8, "Theme", "light") == "light"
        assert settings_cache.get_string("Theme", "unset") == "unset"
        assert [e.setting_key for e in settings_cache.get_by_category("User_7")] == ["User_7.Theme"]


class TestSettingsRefresh:
    """TTL expiry and failure handling."""

    def test_other_process_write_visible_after_ttl(self, settings_cache, store, clock):
        from clinic_access.services import SettingsCache

        other_process = SettingsCache(store, clock=clock)
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        other_process.set_int("ItemsPerPage", 25, "admin")
        # Still inside the TTL: the stale value is served.
        clock.advance(299)
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        clock.advance(2)
        assert settings_cache.get_int("ItemsPerPage", 10) == 25

    def test_fresh_snapshot_does_not_hit_store(self, settings_cache, store, clock):
        settings_cache.get_string("A")
        settings_cache.get_string("B")
        clock.advance(60)
        settings_cache.get_string("C")
        assert store.loads == 1

    def test_failed_reload_serves_defaults(self, settings_cache, store):
        settings_cache.set_int("ItemsPerPage", 25, "admin")
        store.available = False
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        assert settings_cache.get_int("NeverStored", 3) == 3
        assert settings_cache.last_reload.status == ReloadStatus.FAILED
        assert "database is down" in settings_cache.last_reload.error

    def test_recovers_after_store_returns(self, settings_cache, store):
        settings_cache.set_int("ItemsPerPage", 25, "admin")
        store.available = False
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        store.available = True
        # The empty snapshot after a failure is never considered fresh.
        assert settings_cache.get_int("ItemsPerPage", 10) == 25
        assert settings_cache.last_reload.status == ReloadStatus.LOADED

    def test_undecodable_row_fails_reload_not_read(self, settings_cache, session_factory):
        with session_factory() as db:
            db.execute(text(
                "INSERT INTO system_settings (setting_key, setting_value, setting_type, category, last_modified) "
                "VALUES ('ItemsPerPage', '25', 'Int', 'General', 'not-a-date')"
            ))
            db.commit()
        assert settings_cache.get_int("ItemsPerPage", 10) == 10
        assert settings_cache.last_reload.status == ReloadStatus.FAILED

    def test_empty_store_is_loaded_not_failed(self, settings_cache):
        assert settings_cache.get_string("Anything", "x") == "x"
        assert settings_cache.last_reload.status == ReloadStatus.LOADED
        assert settings_cache.last_reload.error is None
