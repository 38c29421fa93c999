"""
All the routines to talk to the API: the raw HTTP calls, the streaming,
and the typed operations on top of them.

The underlying HTTP client library is only used in `api` and `auth`
(and in `errors` to read the failed responses).
All other modules work with the typed objects, the raw JSON-decoded payloads,
and our own errors (see `errors`), never with the HTTP client's classes.
"""
