"""Domain layer for zenledger application."""

# Lazy: database.base imports domain.entities, and every service imports database.base.
_SERVICES = {
    "AccountService": "zenledger.domain.account",
    "CurrencyService": "zenledger.domain.currency",
    "JournalService": "zenledger.domain.journal",
    "BalanceService": "zenledger.domain.balance",
    "FavoriteService": "zenledger.domain.favorite",
    "SettingsService": "zenledger.domain.settings",
    "BackupService": "zenledger.domain.backup",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
