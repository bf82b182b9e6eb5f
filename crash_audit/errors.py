"""Exception hierarchy for crash audits."""


class CrashAuditError(Exception):
    """Base class for all audit failures."""


class ConfigurationError(CrashAuditError):
    """Invalid command-line arguments or settings."""


class RepositoryError(CrashAuditError):
    """The git repository could not be opened, walked or diffed."""


class TrackerFetchError(CrashAuditError):
    """Fetching open issues from the tracker failed."""


class CacheError(CrashAuditError):
    """The open-issue cache could not be read or written."""
