"""
Main application entry point.
"""

from fastapi import FastAPI
from app.api.v1.inventory_endpoints import router as inventory_router

app = FastAPI(
    title="Book Inventory API",
    description="Create, edit, delete, search and export the books of an inventory.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Include API routers
app.include_router(inventory_router, prefix="/api/v1", tags=["inventory"])

@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Book Inventory API",
        "docs": "/docs",
        "health": "/api/v1/health"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
