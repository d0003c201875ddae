"""
Book record management.

Holds the book record models, the storage interface with its MongoDB
implementation, and the service layer used by the HTTP API.
"""
