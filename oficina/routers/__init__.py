"""
API routers, one per page of the application.
"""
