"""
FILE: kanban/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - TITLE_MAX_LENGTH / DESCRIPTION_MAX_LENGTH: Task field limits
  - DEFAULT_COLUMNS: Columns every new board starts with
  - BACKLOG_ORDINAL: Ordinal of the entry column
  - MIN_COLUMN_COUNT: Column count below which removal is refused
  - PASSWORD_MIN_LENGTH / PASSWORD_MAX_LENGTH / COMMON_PASSWORDS
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic numbers
"""

# Task field limits
TITLE_MAX_LENGTH = 50
DESCRIPTION_MAX_LENGTH = 300

# Column defaults (name, ordinal order)
DEFAULT_COLUMNS = ("backlog", "in progress", "done")
BACKLOG_ORDINAL = 0

# A board never drops to fewer columns than this through removal
MIN_COLUMN_COUNT = 2

# Password rules
PASSWORD_MIN_LENGTH = 4
PASSWORD_MAX_LENGTH = 20

# Top 20 passwords published by the National Cyber Security Centre
COMMON_PASSWORDS = frozenset({
    "123456", "123456789", "qwerty", "password", "1111111", "12345678",
    "abc123", "1234567", "password1", "12345", "1234567890", "123123",
    "000000", "Iloveyou", "1234", "1q2w3e4r5t", "Qwertyuiop", "123",
    "Monkey", "Dragon",
})
