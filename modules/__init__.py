"""
Modules Package

Business logic layer of the simulator.

Modules:
- tax: Succession & donation duty engine

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['tax']
