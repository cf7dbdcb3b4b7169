# Routes package init
"""
Showcase API: API Routes Package
===================================

Route Inventory:
    - crud.py:     create_crud_router(name) → POST|GET /api/<name>,
                                             GET|PUT|DELETE /api/<name>/{id}
    - contact.py:  POST /api/contact
    - health.py:   GET  /health

Routes stay thin: read the request, call a service, wrap the outcome in
the success or failure envelope.
"""
