import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tour_planner.api.routes_plan import router as plan_router
from tour_planner.api.routes_experiences import router as experiences_router

from tour_planner.core.config_loader import settings


app = FastAPI(
    title="Tour Itinerary Planner",
    description="Multi-day tour planning driven by an LLM, priced against live experience inventory",
    version="1.0.0"
)

# -------------------------------------------------------------
# CORS
# -------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # update to frontend domain in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------------------------------------------
# ROUTES
# -------------------------------------------------------------
app.include_router(plan_router)
app.include_router(experiences_router)


# -------------------------------------------------------------
# ROOT ENDPOINT
# -------------------------------------------------------------
@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Tour planner backend is running",
        "env": settings.environment
    }


# -------------------------------------------------------------
# RUN LOCAL
# -------------------------------------------------------------
if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
