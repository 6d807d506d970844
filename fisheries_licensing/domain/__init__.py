# SPDX-License-Identifier: Apache-2.0

"""
Domain logic package for the fisheries licensing core.

This package contains pure business logic functions with no side effects.
The reference date is always passed in; nothing here reads the system clock.
"""
