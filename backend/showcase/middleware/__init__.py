# Middleware package init
"""
Showcase API: Middleware Package
===================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for every log line of the request
    2. Logging: access log line with status and duration
    3. GZip / CORS: Starlette built-ins configured in main.py
"""
