"""
General-purpose helpers not related to the client itself
(neither to the API calls nor to the structs), which are used
to prepare and control the runtime environment.

Helpers do not depend on anything in the client. They could be extracted
as reusable libraries, if they were worth it.
"""
