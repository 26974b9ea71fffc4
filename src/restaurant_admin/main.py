import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from restaurant_admin.api import health, users
from restaurant_admin.api.routes.categories import router as categories_router
from restaurant_admin.api.routes.dashboard import router as dashboard_router
from restaurant_admin.api.routes.day import router as day_router
from restaurant_admin.api.routes.expense_types import router as expense_types_router
from restaurant_admin.api.routes.expenses import router as expenses_router
from restaurant_admin.api.routes.inventory import router as inventory_router
from restaurant_admin.api.routes.kitchen import router as kitchen_router
from restaurant_admin.api.routes.menu import router as menu_router
from restaurant_admin.api.routes.orders import router as orders_router
from restaurant_admin.api.routes.purchases import router as purchases_router
from restaurant_admin.api.routes.reports import router as reports_router
from restaurant_admin.api.routes.roles import router as roles_router
from restaurant_admin.api.routes.suppliers import router as suppliers_router
from restaurant_admin.api.routes.tables import router as tables_router
from restaurant_admin.config import settings
from restaurant_admin.db.session import create_schema
from restaurant_admin.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_SCHEMA:
        await create_schema()
        logger.info("Database schema created")
    logger.info("Application started")
    yield
    logger.info("Application stopped")


app = FastAPI(title="Restaurant Admin", lifespan=lifespan)

# Подключаем роуты
app.include_router(health.router)
app.include_router(users.router)
app.include_router(roles_router)
app.include_router(categories_router)
app.include_router(menu_router)
app.include_router(tables_router)
app.include_router(orders_router)
app.include_router(kitchen_router)
app.include_router(inventory_router)
app.include_router(suppliers_router)
app.include_router(purchases_router)
app.include_router(expense_types_router)
app.include_router(expenses_router)
app.include_router(day_router)
app.include_router(reports_router)
app.include_router(dashboard_router)
