"""
Core Infrastructure.

Configuration loading, structured logging, and the exception hierarchy
shared by the execution layer and the CLI.
"""
