# -*- coding: utf-8 -*-
"""
CodeVanta Core Module
Logging, settings and input validation shared by the other packages.
"""

from . import log
from . import settings

__all__ = ["log", "settings"]
