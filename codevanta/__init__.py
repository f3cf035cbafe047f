# -*- coding: utf-8 -*-
"""
CodeVanta package root
Workspace synchronization engine for a GitHub-backed code editor.
"""

__version__ = "0.1.0"
__title__ = "CodeVanta"

# Import core modules to ensure they're available
from . import core

__all__ = ["core"]
