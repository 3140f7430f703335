"""Version information for rbit"""

__version__ = '0.1.0'
__description__ = 'Simple qBittorrent Web API client'
