"""
System components for eigenstats.
"""

from eigenstats.components.config import Config, ConfigManager
