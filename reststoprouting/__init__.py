__title__ = 'reststoprouting'
__version__ = '1.0.0'
__author__ = 'RestStop Team'
__license__ = 'MIT'

__all__ = ['config', 'exceptions', 'logger', 'geocoding', 'path_provider', 'segmenter', 'route_builder']

# Set default logging handler to avoid "No handler found" warnings.
import logging
from logging import NullHandler

logging.getLogger(__name__).addHandler(NullHandler())
