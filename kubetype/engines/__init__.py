"""
Engines are things that run around the API calls to help them,
but are not part of them: e.g. the logging setup and formatting.
"""
