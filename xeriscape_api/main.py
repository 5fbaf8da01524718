"""
Main FastAPI application entry point
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from xeriscape_api.config import API_TITLE, API_DESCRIPTION, API_VERSION, CORS_ORIGINS, logger
from xeriscape_api.handlers.breakdown_handlers import breakdown, topdown_breakdown
from xeriscape_api.handlers.design_handlers import generate_designs, list_tiers

# Initialize FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/")
async def read_root():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Xeriscape Rebate Designer backend is running"}


@app.get("/api/tiers")
async def get_tiers():
    """
    Endpoint listing the pricing/rebate tiers and their design prompts
    """
    return await list_tiers()


@app.post("/api/generate")
async def generate(request: Request):
    """
    Endpoint to generate landscape design images

    Body: {prompt, isEdit, imageBase64, n, aspect}. With isEdit the uploaded
    yard photo is edited instead of generating from scratch.

    Returns:
        JSON response with {"data": [{"url": ...}]} or error details
    """
    return await generate_designs(request)


@app.post("/api/breakdown")
async def create_breakdown(request: Request):
    """
    Endpoint to get a Markdown cost/plant breakdown for a design image

    Body: {imageUrl, tier?}; packageName is accepted in place of tier.

    Returns:
        JSON response with {"breakdown": ...} or error details
    """
    return await breakdown(request)


@app.post("/api/topdown-breakdown")
async def create_topdown_breakdown(request: Request):
    """
    Endpoint to get a breakdown with a top-down layout and a site plan image

    Body: {conceptUrl, satelliteReference?, tier?}

    Returns:
        JSON response with {"breakdown": ..., "topDownUrl": ...} or error details
    """
    return await topdown_breakdown(request)


# Log server startup
@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {API_TITLE} v{API_VERSION}")


# Log server shutdown
@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {API_TITLE}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("xeriscape_api.main:app", host="0.0.0.0", port=8000, reload=True)
