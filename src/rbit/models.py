"""
Data types shared by the configuration, API and presentation layers
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class SessionSettings:
    """Effective connection settings for one invocation (read-only once resolved)"""

    host: str
    username: Optional[str] = None
    password: Optional[str] = None
    default_save_path: Optional[Path] = None
    verbose: bool = False
    dry_run: bool = False

    @property
    def has_credentials(self) -> bool:
        """Login is only attempted when both username and password are known"""
        return self.username is not None and self.password is not None


@dataclass(frozen=True)
class AddMagnet:
    """Add a torrent from a magnet link"""

    uri: str
    save_path: Path


@dataclass(frozen=True)
class AddFile:
    """Upload a local .torrent file"""

    path: Path
    save_path: Path


@dataclass(frozen=True)
class ListTorrents:
    """List torrents, only active ones unless show_all is set"""

    show_all: bool = False


RequestIntent = Union[AddMagnet, AddFile, ListTorrents]


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"expected a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value!r}")
    return value


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(_number(value))


def _rate(value: Any) -> int:
    if value is None:
        return 0
    return int(_number(value))


@dataclass(frozen=True)
class TorrentRecord:
    """
    One torrent as reported by /api/v2/torrents/info

    Rates are bytes/second, progress is 0.0-1.0 (None when not reported).
    """

    name: str
    hash: str
    state: str
    progress: Optional[float] = None
    download_rate: int = 0
    upload_rate: int = 0

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'TorrentRecord':
        """
        Build a record from one torrent object of the API response

        Raises:
            KeyError: If name, hash or state is missing
            ValueError: If progress or a rate is not numeric
            TypeError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a torrent object, got {type(data).__name__}")

        return cls(
            name=str(data['name']),
            hash=str(data['hash']),
            state=str(data['state']),
            progress=_optional_float(data.get('progress')),
            download_rate=_rate(data.get('dlspeed')),
            upload_rate=_rate(data.get('upspeed')),
        )


@dataclass(frozen=True)
class DisplayRow:
    """Formatted table row for one torrent"""

    short_id: str
    name: str
    status: str
    progress: str
    download: str
    upload: str
