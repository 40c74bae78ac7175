import logging
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from mindflash.application.config import resolve_config
from mindflash.application.context import StudyContext
from mindflash.application.deck_service import DeckService
from mindflash.application.due import get_due_cards
from mindflash.application.factory import build_context
from mindflash.application.scheduler import Scheduler
from mindflash.application.stats import StatsService
from mindflash.application.utils.dates import format_day
from mindflash.consts import VERSION
from mindflash.domain.errors import InvalidGradeError, UnknownCardError, UnknownDeckError
from mindflash.infrastructure.repository import LibraryRepository
from mindflash.infrastructure.serialization import card_to_dict

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("mindflash.server")


def get_library(request: Request) -> tuple[StudyContext, LibraryRepository]:
    """The library loaded at startup."""
    return request.app.state.library


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"MindFlash Server v{VERSION} starting up...")
    config = resolve_config()
    app.state.library = build_context(config)
    logger.info(f"Serving library {config.data_file}")
    yield
    # Shutdown
    logger.info("MindFlash Server shutting down...")


app = FastAPI(
    title="MindFlash Server",
    description="HTTP API for MindFlash decks, study grading and analytics.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class DeckSummary(BaseModel):
    id: str
    name: str
    description: str
    cards: int
    due: int


class GradeRequest(BaseModel):
    grade: str


class StatsResponse(BaseModel):
    total: int
    due_today: int
    mastered: int
    streak: int
    boxes: dict[int, int]


class DayCount(BaseModel):
    date: str
    count: int


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=list[DeckSummary])
def list_decks(
    search: str = "",
    library: tuple[StudyContext, LibraryRepository] = Depends(get_library),
):
    context, _ = library
    today = context.today()
    return [
        DeckSummary(
            id=d.id,
            name=d.name,
            description=d.description,
            cards=len(d.cards),
            due=len(get_due_cards(d, today)),
        )
        for d in DeckService(context).filter_decks(search)
    ]


@app.get("/decks/{deck_id}/due")
def due_cards(
    deck_id: str,
    library: tuple[StudyContext, LibraryRepository] = Depends(get_library),
) -> list[dict[str, Any]]:
    """Due cards of a deck, in storage order."""
    context, _ = library
    try:
        deck = DeckService(context).get_deck(deck_id)
    except UnknownDeckError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return [card_to_dict(c) for c in get_due_cards(deck, context.today())]


@app.post("/decks/{deck_id}/cards/{card_id}/grade")
def grade_card(
    deck_id: str,
    card_id: str,
    req: GradeRequest,
    library: tuple[StudyContext, LibraryRepository] = Depends(get_library),
) -> dict[str, Any]:
    """
    Apply a grade, log the review and persist. Returns the updated card.
    """
    context, repo = library
    try:
        card = DeckService(context).get_card(deck_id, card_id)
        Scheduler(context.clock, strict=context.strict_grades).schedule(card, req.grade)
    except (UnknownDeckError, UnknownCardError) as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidGradeError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    context.review_log.record_review(context.today())
    repo.save(context)
    logger.info(f"Graded {card_id} as {req.grade!r}: box={card.box} due={card.next_due}")
    return card_to_dict(card)


@app.get("/stats", response_model=StatsResponse)
def get_stats(
    deck: str | None = None,
    library: tuple[StudyContext, LibraryRepository] = Depends(get_library),
):
    context, _ = library
    service = StatsService(context)
    try:
        summary = service.summary(deck)
        boxes = service.box_distribution(deck)
    except UnknownDeckError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return StatsResponse(
        total=summary.total,
        due_today=summary.due_today,
        mastered=summary.mastered,
        streak=summary.streak,
        boxes=boxes,
    )


@app.get("/reviews", response_model=list[DayCount])
def review_history(
    days: int | None = Query(default=None, ge=1),
    library: tuple[StudyContext, LibraryRepository] = Depends(get_library),
):
    context, _ = library
    return [
        DayCount(date=format_day(day), count=count)
        for day, count in StatsService(context).review_history(days)
    ]
