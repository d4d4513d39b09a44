"""Cross-cutting pieces shared by every bounded context.

The domain composition root, the error taxonomy, the authenticated actor and
the HTTP glue that maps all of them onto FastAPI.
"""
