"""Trade statuses, status groups and period filter names."""

TRADE_STATUSES = ["pending", "unfill", "running", "be", "closed", "done", "cancel", "delete"]

# Statuses a new position may start in
INITIAL_STATUSES = ["pending", "unfill", "running"]

# Contribute to floating P&L
OPEN_STATUSES = frozenset({"running", "unfill", "be"})

# Contribute to realized P&L; "closed" and "done" mean the same thing
COMPLETED_STATUSES = frozenset({"closed", "done"})

# Shown in the monthly history table
HISTORY_STATUSES = OPEN_STATUSES | COMPLETED_STATUSES

STATUS_LABELS: dict[str, str] = {
    "be": "G.F. Target",  # breakeven / final target changed
}

PERIOD_FILTERS = ["All", "3M", "1M", "Custom"]

# Trailing window length in calendar months
ROLLING_PERIOD_MONTHS: dict[str, int] = {
    "1M": 1,
    "3M": 3,
}
