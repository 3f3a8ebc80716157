"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import (
    analytics,
    auth,
    contacts,
    expenses,
    health,
    invoices,
    projects,
    purchase_orders,
    sales_orders,
    tasks,
    timesheets,
    users,
    vendor_bills,
)

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(auth.router, tags=["auth"])
v1_router.include_router(users.router, tags=["users"])
v1_router.include_router(contacts.router, tags=["contacts"])
v1_router.include_router(projects.router, tags=["projects"])
v1_router.include_router(tasks.router, tags=["tasks"])
v1_router.include_router(timesheets.router, tags=["timesheets"])
v1_router.include_router(sales_orders.router, tags=["sales-orders"])
v1_router.include_router(invoices.router, tags=["invoices"])
v1_router.include_router(purchase_orders.router, tags=["purchase-orders"])
v1_router.include_router(vendor_bills.router, tags=["vendor-bills"])
v1_router.include_router(expenses.router, tags=["expenses"])
v1_router.include_router(analytics.router, tags=["analytics"])

api_router.include_router(v1_router)
