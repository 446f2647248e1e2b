from .date_format import format_date, is_date_pattern, is_numeric_format

__all__ = ["format_date", "is_date_pattern", "is_numeric_format"]
