"""
Command-line operations for the inject-commands host.
"""
