"""
Number and size formatting for console output
"""

from .constants import FORMAT_MILLIONS_THRESHOLD, FORMAT_THOUSANDS_THRESHOLD


def _underscored(value: float, format_spec: str) -> str:
    return format(value, format_spec).replace(',', '_')


def format_number(num: int) -> str:
    """
    Format number with underscore as thousand separator

    Examples:
        1234567 -> "1_234_567"
        999 -> "999"
    """
    if num < 1000:
        return str(num)
    return _underscored(num, ',')


def format_size(size_bytes: float) -> str:
    """
    Format byte size with the largest unit below 1024

    Examples:
        1024 -> "1.0 KB"
        512 -> "512 B"
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            if size_bytes >= 1000:
                formatted = _underscored(size_bytes, ',.1f')
            elif size_bytes >= 100:
                formatted = f"{size_bytes:.0f}"
            else:
                formatted = f"{size_bytes:.1f}"
            return f"{formatted} {unit}"
        size_bytes /= 1024.0

    return f"{_underscored(size_bytes, ',.1f')} PB"


def format_docs(count: int) -> str:
    """
    Format document count with K/M suffix

    Examples:
        1234567 -> "1.2M"
        12345 -> "12.3K"
        999 -> "999"
    """
    for threshold, suffix in ((FORMAT_MILLIONS_THRESHOLD, 'M'), (FORMAT_THOUSANDS_THRESHOLD, 'K')):
        if count >= threshold:
            value = count / threshold
            formatted = _underscored(value, ',.1f') if value >= 1000 else f"{value:.1f}"
            return f"{formatted}{suffix}"
    return str(count)
