"""actionfetch command-line interface."""
