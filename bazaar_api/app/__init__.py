"""
Application package.

``core`` holds configuration, logging, persistence and security
helpers; ``services`` the business logic for each domain; ``schemas``
the request and response models; and ``api`` the routers that expose
services over HTTP.
"""
