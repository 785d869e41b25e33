"""
Services Package

External integrations of the simulator.

Modules:
- simulation_mailer: E-mail summary through the Resend API

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""
