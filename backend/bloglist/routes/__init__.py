# Routes package init
"""
Blog List Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.
How:   Each route module handles a specific resource or action.

Route Inventory:
    - blogs.py:   GET    /api/blogs           (list, owners populated)
                  GET    /api/blogs/{id}      (single blog)
                  POST   /api/blogs           (bearer token required)
                  PUT    /api/blogs/{id}      (full replacement, no token)
                  DELETE /api/blogs/{id}      (bearer token + ownership)
    - users.py:   GET    /api/users           (list, blogs populated)
                  POST   /api/users           (register)
    - login.py:   POST   /api/login           (credentials → token)
    - health.py:  GET    /health              (service health check)

Design Principle:
    Routes should be THIN. They handle HTTP concerns only:
    - Extract data from request (path, headers, body)
    - Call the appropriate service
    - Format the response with correct status code and headers

    Caller identity is resolved once, by dependencies.get_current_user,
    and handed to the service as an argument.
"""
