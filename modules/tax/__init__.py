"""
Tax Module - Succession & Donation

Pure transfer-duty engine for French inheritance and gift simulations.

Features:
- Closed relationship categories with a validated, read-only fiscal registry
- Progressive bracket traversal with an explicit unbounded last bracket
- Spouse/PACS inheritance exemption
- Allowance reduction by prior gifts

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['engine', 'inputs', 'models', 'schedules']
