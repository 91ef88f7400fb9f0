"""HTTP routers, one per resource under /api."""
