import uvicorn

from webinar_bot.main import app
from webinar_bot.platform.config import settings

if __name__ == "__main__":
    uvicorn.run("webinar_bot.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
