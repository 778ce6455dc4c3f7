import os

# Stock source selection: "file" or "api"
STOCK_SOURCE = os.getenv("STOCK_SOURCE", "file").lower()
INVENTORY_FILE = os.getenv("INVENTORY_FILE", "inventory.json")

STOCK_API_URL = os.getenv("STOCK_API_URL", "http://localhost:8081")
STOCK_API_TIMEOUT_MS = int(os.getenv("STOCK_API_TIMEOUT_MS", "1000"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))
