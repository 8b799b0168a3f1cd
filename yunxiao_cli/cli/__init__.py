"""
CLI Module.

Command-line client built with Typer for calling the Yunxiao OpenAPI.

Architecture:
- CLI is a thin presentation layer
- Commands build request candidates; the api package executes them
- Results are printed as JSON on stdout, errors and logs go to stderr

Usage:
    yx --help
    yx api get /oapi/v1/platform/user
    yx doctor
"""
