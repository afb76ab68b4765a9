"""
HTTP routers for the App Store site API
"""
