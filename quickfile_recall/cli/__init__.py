"""Terminal host and ``qfr`` command line."""
