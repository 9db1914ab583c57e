"""Contract tests for the ByteBard blog API.

Each test pins the exact request an endpoint method sends: the URL with
its action and query string, the HTTP method, the headers and the body.
"""
