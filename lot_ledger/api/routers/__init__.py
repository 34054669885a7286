"""API router package for endpoint composition."""

from .corporate_actions import api_create_corporate_action_router, api_create_sync_router
from .health import api_create_health_router
from .instruments import api_create_instrument_router
from .transactions import api_create_transaction_router

__all__ = [
	"api_create_corporate_action_router",
	"api_create_health_router",
	"api_create_instrument_router",
	"api_create_sync_router",
	"api_create_transaction_router",
]
