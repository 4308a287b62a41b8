"""
Shared Kernel

This module contains value objects and infrastructure helpers shared
across all apps: date ranges, pagination and API error rendering.
"""
