"""
API routers.
"""
from .csv_import import router as csv_import_router
from .contact_lists import router as contact_lists_router
from .contacts import router as contacts_router

__all__ = ["csv_import_router", "contact_lists_router", "contacts_router"]
