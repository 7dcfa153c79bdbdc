# gantt_app/__main__.py
import uvicorn

from .settings import settings


def main() -> None:
    uvicorn.run("gantt_app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
