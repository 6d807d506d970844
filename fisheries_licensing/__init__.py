# SPDX-License-Identifier: Apache-2.0

"""
Fisheries licensing core.

Tracks fisher profiles, licensed boats and seasonal permits through
their status, expiry and quota lifecycle.
"""

__version__ = "1.0.0"
