"""
Utilities Package

Logging, configuration and fr-FR formatting helpers.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""
