"""
All the structures of the client: typed resources, raw bodies, selectors,
resource descriptors, settings, credentials.

All the structures are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
