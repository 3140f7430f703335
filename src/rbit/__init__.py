"""
rbit - add torrents to qBittorrent and list them from the command line
"""

from rbit.__version__ import __version__, __description__

__all__ = ['__version__', '__description__']
