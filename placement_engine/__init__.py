"""Placement engine package.

The package turns pasted placement notifications into tasks with reminders:
- `models.py` defines the records the rest of the app consumes.
- `extract.py` holds the ordered pattern tables and the field extractor.
- `normalize.py` parses day-first date tokens and 12/24-hour time tokens.
- `scheduler.py` derives alert timestamps and drives a dispatcher.
- `dispatchers/` contains notification backends (in-memory, HTTP relay).
"""
