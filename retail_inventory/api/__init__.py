"""
API package - HTTP layer of the retail inventory service
"""
