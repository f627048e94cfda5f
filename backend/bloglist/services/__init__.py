# Services package init
"""
Blog List Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services accept a session plus validated inputs, apply business rules,
       and return response schemas. Each is a stateless module-level singleton.

Service Inventory:
    - BlogService: list / get / create / update / delete with ownership checks
    - UserService: registration, listing, lookups
    - AuthService: login and bearer-token → User resolution

Dependency direction:
    blog_service ─┐
    auth_service ─┴─▶ user_service ─▶ security (hashing, tokens)
"""
