"""CLI command handlers. Each ``cmd_*`` takes ``(args, nb)``."""
