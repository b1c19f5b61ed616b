"""resumerag command-line interface."""
