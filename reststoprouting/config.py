"""
Configuration management for the RestStop routing engine
"""

import os
from typing import List, Optional


KNOWN_PATH_BACKENDS = ('osrm', 'ors', 'mapbox')


class Config:
    """Configuration class for the RestStop routing engine"""

    def __init__(self):
        # Geocoding (Nominatim)
        self.nominatim_url: str = os.getenv('NOMINATIM_URL', 'https://nominatim.openstreetmap.org')
        self.nominatim_user_agent: str = os.getenv('NOMINATIM_USER_AGENT', 'RestStopRouting/1.0')
        self.nominatim_min_interval: float = float(os.getenv('NOMINATIM_MIN_INTERVAL', '1.0'))
        self.preferred_region: str = os.getenv('PREFERRED_REGION', 'tw').lower()
        self.accept_language: str = os.getenv('ACCEPT_LANGUAGE', 'zh-TW,en')

        # Walking path backends, tried in order
        self.osrm_url: str = os.getenv('OSRM_URL', 'https://routing.openstreetmap.de/routed-foot')
        self.ors_api_key: str = os.getenv('ORS_API_KEY', '')
        self.mapbox_token: str = os.getenv('MAPBOX_TOKEN', '')
        self.path_backends: List[str] = [
            name.strip().lower()
            for name in os.getenv('PATH_BACKENDS', 'osrm,ors,mapbox').split(',')
            if name.strip()
        ]
        self.request_timeout: float = float(os.getenv('REQUEST_TIMEOUT', '10'))

        # Segmentation parameters
        self.max_named_stops: int = int(os.getenv('MAX_NAMED_STOPS', '10'))
        self.max_fallback_stops: int = int(os.getenv('MAX_FALLBACK_STOPS', '8'))
        self.end_buffer_meters: float = float(os.getenv('END_BUFFER_METERS', '500'))
        self.minutes_per_km: float = float(os.getenv('MINUTES_PER_KM', '15'))
        self.default_interval_km: float = float(os.getenv('DEFAULT_INTERVAL_KM', '1.0'))

        # API configuration
        self.host: str = os.getenv('HOST', '0.0.0.0')
        self.port: int = int(os.getenv('PORT', '5000'))
        self.debug: bool = os.getenv('DEBUG', 'False').lower() == 'true'

        # Logging
        self.log_level: str = os.getenv('LOG_LEVEL', 'INFO')
        self.log_file: Optional[str] = os.getenv('LOG_FILE')

    def validate(self):
        """Validate configuration"""
        if self.request_timeout <= 0:
            raise ValueError("Request timeout must be positive")

        if self.nominatim_min_interval < 0:
            raise ValueError("Nominatim minimum interval cannot be negative")

        if self.max_named_stops < 0 or self.max_fallback_stops < 0:
            raise ValueError("Stop caps cannot be negative")

        if self.end_buffer_meters < 0:
            raise ValueError("End buffer cannot be negative")

        if self.minutes_per_km <= 0:
            raise ValueError("Walking pace must be positive")

        if self.default_interval_km <= 0:
            raise ValueError("Default interval must be positive")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f"Invalid log level: {self.log_level}")

        if not self.path_backends:
            raise ValueError("At least one path backend is required")

        unknown = [name for name in self.path_backends if name not in KNOWN_PATH_BACKENDS]
        if unknown:
            raise ValueError(f"Unknown path backends: {', '.join(unknown)}")

    def get_segmenter_config(self) -> dict:
        """Get configuration for Segmenter"""
        return {
            'max_named_stops': self.max_named_stops,
            'max_fallback_stops': self.max_fallback_stops,
            'end_buffer_meters': self.end_buffer_meters,
        }

    def get_api_config(self) -> dict:
        """Get configuration for Flask API"""
        return {
            'host': self.host,
            'port': self.port,
            'debug': self.debug
        }
