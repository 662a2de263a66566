"""Default data tables: access-level presets, role templates and settings defaults."""
from clinic_access.core.enums import AccessLevel, Module, Role, ValueType
from clinic_access.schemas import PermissionFlags


def _flags(view, create, edit, delete, export) -> PermissionFlags:
    return PermissionFlags(view=view, create=create, edit=edit, delete=delete, export=export)


T, F = True, False

ACCESS_LEVEL_FLAGS = {
    AccessLevel.FULL_ACCESS: _flags(T, T, T, T, T),
    AccessLevel.READ_WRITE: _flags(T, T, T, F, T),
    AccessLevel.VIEW_CREATE: _flags(T, T, F, F, T),
    AccessLevel.VIEW_ONLY: _flags(T, F, F, F, F),
    AccessLevel.NO_ACCESS: _flags(F, F, F, F, F),
}


def flags_for_access_level(level) -> PermissionFlags:
    """Flags of a named preset; unrecognized names grant nothing."""
    parsed = AccessLevel.parse(level)
    if parsed is None:
        return ACCESS_LEVEL_FLAGS[AccessLevel.NO_ACCESS]
    return ACCESS_LEVEL_FLAGS[parsed]


DEFAULT_ROLE_TEMPLATES = {
    Role.ADMINISTRATOR: {module: ACCESS_LEVEL_FLAGS[AccessLevel.FULL_ACCESS] for module in Module},
    Role.DOCTOR: {
        Module.DASHBOARD: _flags(T, F, F, F, T),
        Module.PATIENT_MANAGEMENT: _flags(T, T, T, F, T),
        Module.APPOINTMENTS: _flags(T, T, T, T, T),
        Module.MEDICINE_INVENTORY: _flags(T, F, F, F, F),
        Module.PRESCRIPTIONS: _flags(T, T, T, T, T),
        Module.USER_MANAGEMENT: _flags(F, F, F, F, F),
        Module.REPORTS: _flags(T, T, F, F, T),
        Module.SYSTEM_SETTINGS: _flags(F, F, F, F, F),
    },
    Role.RECEPTIONIST: {
        Module.DASHBOARD: _flags(T, F, F, F, F),
        Module.PATIENT_MANAGEMENT: _flags(T, T, T, F, T),
        Module.APPOINTMENTS: _flags(T, T, T, T, T),
        Module.MEDICINE_INVENTORY: _flags(T, F, F, F, F),
        Module.PRESCRIPTIONS: _flags(T, F, F, F, T),
        Module.USER_MANAGEMENT: _flags(F, F, F, F, F),
        Module.REPORTS: _flags(T, F, F, F, T),
        Module.SYSTEM_SETTINGS: _flags(F, F, F, F, F),
    },
}


S, I, B = ValueType.STRING, ValueType.INT, ValueType.BOOL

# category -> key -> (default raw value, declared type)
DEFAULT_SETTINGS = {
    "General": {
        "ClinicName": ("Rosal Medical Clinic", S),
        "ClinicAddress": ("", S),
        "ClinicContactNumber": ("", S),
        "DateFormat": ("MM/dd/yyyy", S),
        "TimeFormat": ("12", S),
        "Timezone": ("Asia/Manila", S),
        "DefaultLandingPage": ("Dashboard", S),
        "ItemsPerPage": ("10", I),
        "AutoRefreshInterval": ("0", I),
        "EnableSoundNotifications": ("true", B),
    },
    "Notification": {
        "EnableInAppNotifications": ("true", B),
        "EnableLowStockAlerts": ("true", B),
        "LowStockThreshold": ("50", I),
        "EnableExpiryAlerts": ("true", B),
        "ExpiryAlertDays": ("30", I),
        "EnableAppointmentReminders": ("true", B),
        "AppointmentReminderHours": ("1", I),
        "LowStockAlertRecipients": ("Administrator,Doctor", S),
        "AppointmentReminderRecipients": ("Doctor,Receptionist", S),
    },
    "Security": {
        "PasswordMinLength": ("8", I),
        "PasswordRequireUppercase": ("true", B),
        "PasswordRequireLowercase": ("true", B),
        "PasswordRequireNumbers": ("true", B),
        "PasswordRequireSpecial": ("false", B),
        "PasswordExpiryDays": ("0", I),
        "PasswordHistoryCount": ("5", I),
        "ForcePasswordChangeOnFirstLogin": ("true", B),
        "MaxFailedLoginAttempts": ("3", I),
        "AccountLockoutMinutes": ("5", I),
        "EnableRememberMe": ("false", B),
        "RememberMeDays": ("7", I),
        "SessionTimeoutMinutes": ("30", I),
        "SessionWarningMinutes": ("5", I),
        "AllowConcurrentSessions": ("true", B),
        "ForceLogoutOtherSessions": ("false", B),
    },
    "Backup": {
        "BackupLocation": ("C:\\RosalHealthcare\\Backups", S),
        "BackupCompression": ("true", B),
        "BackupEncryption": ("false", B),
        "BackupEncryptionPassword": ("", S),
        "AutoBackupEnabled": ("false", B),
        "AutoBackupFrequency": ("Daily", S),
        "AutoBackupTime": ("23:00", S),
        "AutoBackupDayOfWeek": ("Sunday", S),
        "AutoBackupDayOfMonth": ("1", I),
        "BackupRetentionCount": ("10", I),
    },
    "Database": {
        "LogRetentionDays": ("90", I),
        "EnableAuditLogs": ("true", B),
        "ArchiveRecordsOlderThanYears": ("5", I),
    },
}

_DEFAULTS_BY_KEY = {
    key: default
    for category in DEFAULT_SETTINGS.values()
    for key, default in category.items()
}


def default_for(key: str):
    """(raw default, declared type) of a well-known setting, or None."""
    return _DEFAULTS_BY_KEY.get(key)
