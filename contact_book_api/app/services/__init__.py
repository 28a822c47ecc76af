"""
Service layer.

Services hold the business rules of a domain and talk to storage
through the store objects in ``core``; API handlers only translate
HTTP requests into service calls.
"""
