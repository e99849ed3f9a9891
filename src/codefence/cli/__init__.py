"""Command-line front end for codefence."""
