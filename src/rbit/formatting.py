"""
Table rendering for the torrent list
"""

from typing import Iterable, List, Optional

from rbit.models import DisplayRow, TorrentRecord

SHORT_ID_LENGTH = 8
MAX_NAME_LENGTH = 40
ELLIPSIS = '...'
# longest qBittorrent state is checkingResumeData
STATUS_WIDTH = 18

SPEED_UNITS = [
    ('GB/s', 1024 ** 3),
    ('MB/s', 1024 ** 2),
    ('KB/s', 1024),
]

# (header, width) in display order
COLUMNS = [
    ('ID', SHORT_ID_LENGTH),
    ('Name', MAX_NAME_LENGTH + len(ELLIPSIS)),
    ('Status', STATUS_WIDTH),
    ('Progress', 8),
    ('Down', 14),
    ('Up', 14),
]


def short_id(torrent_hash: str) -> str:
    """First 8 characters of the hash (the whole hash if shorter)"""
    return torrent_hash[:SHORT_ID_LENGTH]


def truncate_name(name: str) -> str:
    """
    Cut long names to 40 characters plus '...'

    Examples:
        >>> truncate_name('a' * 41)
        'aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa...'
    """
    if len(name) > MAX_NAME_LENGTH:
        return name[:MAX_NAME_LENGTH] + ELLIPSIS
    return name


def format_progress(progress: Optional[float]) -> str:
    """Progress as '42.0%', or '-' when unknown"""
    if progress is None:
        return '-'
    return f"{progress * 100:.1f}%"


def format_speed(bytes_per_second: float) -> str:
    """
    Format speed into human-readable string

    Args:
        bytes_per_second: Speed in bytes per second

    Returns:
        Formatted string like "0 B/s", "2.00 KB/s" or "1.00 GB/s"
    """
    for unit, size in SPEED_UNITS:
        if bytes_per_second >= size:
            return f"{bytes_per_second / size:.2f} {unit}"
    return f"{int(bytes_per_second)} B/s"


def to_display_row(record: TorrentRecord) -> DisplayRow:
    """Format one torrent for the table"""
    return DisplayRow(
        short_id=short_id(record.hash),
        name=truncate_name(record.name),
        status=record.state,
        progress=format_progress(record.progress),
        download=format_speed(record.download_rate),
        upload=format_speed(record.upload_rate),
    )


def _format_line(values: List[str]) -> str:
    # cells wider than their column are clipped to keep the columns aligned
    cells = [f"{value[:width]:<{width}}" for value, (_, width) in zip(values, COLUMNS)]
    return ' '.join(cells).rstrip()


def render_table(records: Iterable[TorrentRecord]) -> str:
    """
    Render torrents as a fixed-column table with a header row

    Columns: ID, Name, Status, Progress, Down, Up
    """
    header = _format_line([name for name, _ in COLUMNS])
    lines = [header, '-' * (sum(width for _, width in COLUMNS) + len(COLUMNS) - 1)]

    for record in records:
        row = to_display_row(record)
        lines.append(_format_line([
            row.short_id, row.name, row.status, row.progress, row.download, row.upload
        ]))

    return "\n".join(lines)
