# adapters/api.py - FastAPI surface over the recommendation service
from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List
import time
import logging

from usecases.recommendation_service import RecommendationService, get_recommendation_service

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Pydantic schemas
class FeedbackRequest(BaseModel):
    user_ids: List[int] = Field(..., description="Users who rated the item", min_length=1)
    item_key: str = Field(..., description="Key (URL) of the rated item")
    liked: bool = Field(..., description="True for a like, False for a dislike")

class FeedbackResponse(BaseModel):
    item_key: str
    liked: bool
    updated_user_ids: List[int] = Field(..., description="Users whose trees were retrained")

class UserRecommendations(BaseModel):
    user_id: int = Field(..., description="User ID")
    item_keys: List[str] = Field(..., description="Recommended item keys")
    processing_time_ms: float = Field(..., description="Processing time in milliseconds")

class ItemAudience(BaseModel):
    item_key: str = Field(..., description="Item key")
    user_ids: List[int] = Field(..., description="Users predicted to like the item")

class HealthResponseSchema(BaseModel):
    status: str
    timestamp: float
    users: int
    items: int

# Create FastAPI app
app = FastAPI(
    title="Item Recommendation API",
    description="Per-user decision tree recommendations over boolean item attributes",
    version="1.0.0"
)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Performance monitoring middleware
@app.middleware("http")
async def performance_middleware(request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 0.1:
        logger.warning(f"Slow request: {request.url.path} took {process_time*1000:.2f}ms")

    return response

def _service() -> RecommendationService:
    try:
        return get_recommendation_service()
    except RuntimeError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )

# Health check endpoint
@app.get("/health", response_model=HealthResponseSchema)
async def health_check():
    """Health check endpoint"""
    service = _service()
    return HealthResponseSchema(
        status="healthy",
        timestamp=time.time(),
        users=len(service.users),
        items=len(service.items)
    )

@app.get("/users/{user_id}/recommendations", response_model=UserRecommendations)
async def recommend_to_user(user_id: int):
    """
    Up to five unrated items the user's tree predicts they will like.

    Candidates are sampled at random, so repeated calls may differ.
    """
    start_time = time.time()
    service = _service()
    user = service.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")

    items = service.recommend_to_user(user)
    return UserRecommendations(
        user_id=user_id,
        item_keys=sorted(item.key for item in items),
        processing_time_ms=(time.time() - start_time) * 1000
    )

@app.get("/items/audience", response_model=ItemAudience)
async def recommend_item_to_users(key: str = Query(..., description="Item key (URL)")):
    """Every user whose tree predicts they will like the item"""
    service = _service()
    item = service.get_item(key)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {key} not found")

    users = service.recommend_item_to_users(item)
    return ItemAudience(item_key=key, user_ids=sorted(user.id for user in users))

@app.post("/feedback", response_model=FeedbackResponse)
async def record_feedback(request: FeedbackRequest):
    """Record a like/dislike and retrain the affected users' trees"""
    service = _service()
    item = service.get_item(request.item_key)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Item {request.item_key} not found")

    users = []
    for user_id in request.user_ids:
        user = service.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"User {user_id} not found")
        users.append(user)

    try:
        service.record_feedback(users, item, request.liked)
    except ValueError as e:
        logger.error(f"Recording feedback failed for item {request.item_key}: {e}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return FeedbackResponse(
        item_key=request.item_key,
        liked=request.liked,
        updated_user_ids=sorted({user.id for user in users})
    )

@app.get("/trees", response_model=Dict[int, str])
async def dump_trees():
    """Level-by-level text dump of every user's tree (diagnostics only)"""
    return _service().describe()

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": "Item Recommendation API",
        "version": "1.0.0",
        "description": "Per-user decision trees trained on like/dislike feedback",
        "endpoints": {
            "recommend": "GET /users/{user_id}/recommendations",
            "audience": "GET /items/audience?key=...",
            "feedback": "POST /feedback",
            "trees": "GET /trees",
            "health_check": "GET /health",
            "documentation": "GET /docs"
        }
    }
