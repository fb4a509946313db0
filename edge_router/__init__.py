"""
Edge Router: picks the deployed build and tier that serve each request,
and keeps clients on that choice with a sticky cookie.
"""
