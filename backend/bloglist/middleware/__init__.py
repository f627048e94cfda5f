# Middleware package init
"""
Blog List Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Request ID] → [Rate Limit] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so even rate-limited responses carry X-Request-ID
    - Rate Limit before any route work (bcrypt hashing in particular)
    - Logging records status and duration of everything that got through
"""
