"""
Schemas module - Request schemas for API endpoints.

Responses use the {success, data|error, count?} envelope built in the routes.
"""
