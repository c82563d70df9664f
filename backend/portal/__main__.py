"""
Serve the portal:

    python -m portal            (or the `tournament-portal` script)

Same as `uvicorn portal.main:app --host HOST --port PORT`.
"""
import uvicorn

from portal.core.config import settings


def main():
    uvicorn.run("portal.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
