"""
Configuration for field generation and the API service.
"""

from .config import Settings, settings
from .field_params import FieldParams
from .log_setup import configure_logging

__all__ = ['Settings', 'settings', 'FieldParams', 'configure_logging']
