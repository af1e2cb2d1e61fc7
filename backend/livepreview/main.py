from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response, StreamingResponse
from pydantic import BaseModel

from livepreview.examples import EXAMPLES
from livepreview.pipeline import generate_from_url, generate_from_url_streaming
from livepreview.scraper import check_scraper_connection, scrape_website
from livepreview.session import PreviewSession
from livepreview.snippet_validator import format_report, validate_snippet


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one browser-backed preview session for the whole process
    session = PreviewSession()
    try:
        await session.start()
        app.state.session = session
    except Exception as e:
        print(f"[session] Failed to start preview: {e}")
        app.state.session = None
    yield
    if app.state.session is not None:
        await app.state.session.stop()
        app.state.session = None


app = FastAPI(title="Live Preview API", lifespan=lifespan)
app.state.session = None

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

class SourceRequest(BaseModel):
    source: str


class LintRequest(BaseModel):
    source: str | None = None


class GenerateRequest(BaseModel):
    url: str


def _session(request: Request) -> PreviewSession:
    session = request.app.state.session
    if session is None or not session.started:
        raise HTTPException(status_code=503, detail="Preview is not running")
    return session


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/")
def root():
    return {"message": "Live preview backend is running"}


@app.get("/health")
async def health(request: Request):
    session = request.app.state.session
    return {"status": "ok", "preview": session is not None and session.started}


@app.get("/examples")
async def list_examples():
    return {"examples": [{"name": name, "source": source} for name, source in EXAMPLES.items()]}


@app.post("/examples/{name}/load")
async def load_example(name: str, request: Request):
    """Replace the buffer with a canned example; the preview re-renders."""
    session = _session(request)
    if name not in EXAMPLES:
        raise HTTPException(status_code=404, detail=f"Unknown example: {name}")
    await session.load_example(name)
    return session.snapshot()


@app.get("/source")
async def get_source(request: Request):
    return {"source": _session(request).buffer.get()}


@app.put("/source")
async def put_source(body: SourceRequest, request: Request):
    session = _session(request)
    await session.buffer.set(body.source)
    return session.snapshot()


@app.post("/source/undo")
async def undo_source(request: Request):
    session = _session(request)
    changed = await session.buffer.undo()
    return {"changed": changed, **session.snapshot()}


@app.post("/source/redo")
async def redo_source(request: Request):
    session = _session(request)
    changed = await session.buffer.redo()
    return {"changed": changed, **session.snapshot()}


@app.post("/lint")
async def lint(body: LintRequest, request: Request):
    """Static checks for a snippet (the buffer's text when none is given)."""
    source = body.source if body.source is not None else _session(request).buffer.get()
    validation = validate_snippet(source)
    return {**validation, "report": format_report(validation)}


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

@app.get("/preview")
async def get_preview(request: Request):
    session = _session(request)
    try:
        html = await session.engine.mounted_html()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Could not read preview: {e}")
    return {**session.snapshot(), "html": html}


@app.post("/preview/refresh")
async def refresh_preview(request: Request):
    session = _session(request)
    await session.engine.refresh()
    return session.snapshot()


@app.get("/preview/screenshot")
async def preview_screenshot(request: Request):
    session = _session(request)
    try:
        png = await session.engine.screenshot()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Screenshot failed: {e}")
    return Response(content=png, media_type="image/png")


# ---------------------------------------------------------------------------
# Scraping + generation
# ---------------------------------------------------------------------------

@app.post("/scrape")
async def scrape(options: dict):
    """Raw ScraperAPI call. Accepts camelCase option names."""
    result = await scrape_website(options)
    return result.model_dump()


@app.get("/scrape/test")
async def scrape_test():
    return await check_scraper_connection()


@app.post("/generate")
async def generate(body: GenerateRequest, request: Request):
    """Scrape a URL, generate a snippet and load it into the preview if one is running."""
    session = request.app.state.session
    buffer = session.buffer if session is not None and session.started else None
    try:
        result = await generate_from_url(body.url, buffer)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Generation failed: {str(e)}")
    return result.model_dump()


@app.post("/generate/stream")
async def generate_stream(body: GenerateRequest, request: Request):
    """Same as /generate with progress streamed via SSE."""
    session = request.app.state.session
    buffer = session.buffer if session is not None and session.started else None

    async def event_stream():
        async for event in generate_from_url_streaming(body.url, buffer):
            yield event

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
