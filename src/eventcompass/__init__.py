"""Recurring calendar events: rule strings, series expansion and list views."""
