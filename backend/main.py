"""
App Store site API
Public site content, contact form and the admin dashboard backend
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import SITE_NAME, APP_VERSION, CORS_ORIGINS
from database import client
from lifespan import lifespan
from routers import admin, auth, locale, public

logger = logging.getLogger(__name__)

app = FastAPI(title=f"{SITE_NAME} API", version=APP_VERSION, lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(locale.router)
app.include_router(auth.router)
app.include_router(public.router)
app.include_router(admin.router)


@app.get("/")
async def root():
    return {"message": f"{SITE_NAME} API", "version": APP_VERSION}


@app.get("/health")
async def health():
    try:
        await client.admin.command('ping')
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Database unhealthy: {str(e)}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
