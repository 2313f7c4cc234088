"""
HTTP API сервиса
"""
