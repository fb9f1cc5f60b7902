"""
Test suite for the Farm Records API.

Test Organization:
- integration/ - API tests driven through the URL routes with the DRF test client
- unit/ - Pure calculation tests (alerts, reports, batch and health figures)

Shared fixtures (users, farms, batches, clients) live in the root conftest.py.
"""
