"""
Services layer for the App Store site API.

This module contains domain-focused service classes that encapsulate
content reads, dashboard aggregation and admin mutations, separating them
from HTTP handling in routers.
"""
