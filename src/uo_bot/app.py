"""FastAPI application with lifespan and health endpoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from uo_bot.bot import Bot
from uo_bot.config import get_settings
from uo_bot.logging_config import configure_logging
from uo_bot.slack.router import router as slack_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: configure logging, build the bot, run its routines."""
    settings = get_settings()
    configure_logging(settings.log_level)
    bot = Bot(settings)
    app.state.settings = settings
    app.state.bot = bot

    if settings.enable_routines:
        await bot.start()
    else:
        logger.info("Routines disabled, serving commands only")

    yield

    await bot.stop()


app = FastAPI(
    title="UO Bot",
    lifespan=lifespan,
)
app.include_router(slack_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": "uo-bot",
        "version": "0.1.0",
    }


@app.get("/routines")
async def routines():
    """Report each periodic routine and how often it has run."""
    bot: Bot = app.state.bot
    return {
        name: {
            "interval": routine.interval,
            "invocations": routine.invocations,
            "cancelled": routine.cancelled,
        }
        for name, routine in bot.scheduler.routines.items()
    }
