from fastapi import FastAPI
from app.services.travel_data.routers import router as travel_data_router

import uvicorn
from app.utils import setup_logging

setup_logging()


app = FastAPI(
    title="Travel Tracker API",
    description="Past, current and planned destinations loaded from the travel spreadsheet",
    version="1.0.0",
)

@app.get("/", tags=["Status"])
def health_check():
    return {
        "status": "online",
        "service": "Travel Tracker API",
        "version": "1.0.0"
    }

app.include_router(travel_data_router, prefix="/api/travel-data", tags=["Travel"])

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
