"""
Notekeep Backend: Middleware Package
=====================================

Middleware Chain (request direction):
    [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

Starlette runs middleware in reverse order of registration, so main.py adds
them as CORS, GZip, Logging, Request ID, Rate Limit.
"""
