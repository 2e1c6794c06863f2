"""Maestro CLI commands, one module per subcommand."""
