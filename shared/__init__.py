"""
Elfscope Shared Module
=======================

Configuration, logging and console utilities shared by the Elfscope
decoder, its output layer and its command-line interface.
"""

from shared.config import ElfscopeConfig, get_config

__all__ = ["ElfscopeConfig", "get_config"]
