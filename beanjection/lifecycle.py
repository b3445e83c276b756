"""
BeanjectionLifeCycle Enum

Defines the scope of beans
"""

from enum import Enum


class BeanjectionLifeCycle(Enum):
    """Scope of beans"""
    SINGLETON = "singleton"
    PROTOTYPE = "prototype"
