from fastapi import APIRouter

from stockledger.api.routes import inventory, notifications, products


api_router = APIRouter()
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["Inventory"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
