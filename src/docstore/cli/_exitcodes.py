"""Process exit codes for docstore commands."""

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2
NOT_FOUND = 3
DATABASE_ERROR = 4
