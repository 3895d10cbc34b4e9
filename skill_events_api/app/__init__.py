"""
Application package initializer.

The project is organised into logical pieces: ``core`` holds
configuration, logging, errors and the in-memory store; ``services``
holds the business logic (ledger, catalog, registry, registration);
``schemas`` the pydantic request/response models; and ``api`` the
versioned HTTP routers.
"""

from .main import app  # noqa: F401
