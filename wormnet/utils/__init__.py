"""
Simple utilities used by analysis code.
"""
from .logging import get_logger, set_level
