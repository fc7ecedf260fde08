"""
Core infrastructure: settings-driven database, logging, errors and auth
"""
