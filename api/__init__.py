"""
FastAPI RESTful API for the Book Records service.

This module provides the HTTP surface for:
- Creating and updating books
- Soft-deleting books
- Paginated, searchable listing of active books
"""
