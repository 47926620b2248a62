from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import asyncio

from landing_cloner.browser_pool import BrowserPool
from landing_cloner.cloner import clone_website
from landing_cloner.config import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One browser process for every request; launched lazily on first clone
    app.state.browser_pool = BrowserPool.from_settings(get_settings())
    yield
    await app.state.browser_pool.shutdown()


app = FastAPI(title="Landing Cloner API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class CloneRequest(BaseModel):
    url: str
    message: str | None = None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health(request: Request):
    pool = request.app.state.browser_pool
    return {"status": "ok", "active_pages": pool.active}


@app.post("/clone")
async def clone_website_endpoint(body: CloneRequest, request: Request):
    """Clone a landing page into a LandingConfig."""
    url = body.url.strip()
    if not url:
        raise HTTPException(status_code=422, detail="URL is required")
    if not url.startswith(("http://", "https://")):
        url = "https://" + url

    settings = get_settings()
    try:
        result = await asyncio.wait_for(
            clone_website(url, body.message, pool=request.app.state.browser_pool, settings=settings),
            timeout=settings.clone_timeout,
        )
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail="Clone timed out. Try a simpler page.")

    return result.model_dump(by_alias=True)
