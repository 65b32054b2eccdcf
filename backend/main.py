# backend/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import settings
from database import init_db

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Router imports
from routes.auth import router as auth_router
from routes.logs import router as logs_router
from routes.cart import router as cart_router
from routes.orders import router as orders_router, admin_router as admin_orders_router
from routes.products import router as products_router
from routes.categories import router as categories_router
from routes.product_groups import router as product_groups_router
from routes.settings import router as settings_router
from routes.stats import router as stats_router
from routes.shop import router as shop_router

# Initialization
init_db()

app = FastAPI(title="Appliance Store API", version="1.0.0")

# Uploads - make sure the directory exists before mounting it
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

# Credentials are needed for the cart cookie, so origins must be explicit
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(shop_router)
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(auth_router)
app.include_router(products_router)
app.include_router(categories_router)
app.include_router(product_groups_router)
app.include_router(admin_orders_router)
app.include_router(settings_router)
app.include_router(stats_router)
app.include_router(logs_router)

@app.get("/")
def read_root():
    return {"message": "Appliance Store API is running"}
