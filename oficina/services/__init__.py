"""
Business services shared by the routers.
"""
