"""
This file marks the 'avmerger' directory as a Python package.

The package is laid out in layers: `config` holds static settings and the
optional user configuration, `domain` holds the data models and exceptions,
`services` holds the discovery, merge and concat logic, `pipeline` holds the
bounded-concurrency batch runner, and `utils` holds helpers for running
external tools.
"""
