"""Date manipulation utilities"""

from datetime import date


def year_suffix(on: date) -> str:
    """Last two digits of the calendar year, zero padded"""
    return f"{on.year % 100:02d}"
