"""Process exit codes for the cimetrics CLI."""

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERNAL_ERROR = 3
