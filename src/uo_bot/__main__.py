"""Run the bot service: ``python -m uo_bot``."""

import uvicorn

from uo_bot.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("uo_bot.app:app", host="0.0.0.0", port=settings.port, log_config=None)
