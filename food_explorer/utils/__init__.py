"""
Utility modules for the explorer
"""
from .config_loader import ExplorerConfig, load_explorer_config

__all__ = [
    'ExplorerConfig',
    'load_explorer_config',
]
