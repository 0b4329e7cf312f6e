from fastapi import FastAPI

from fastsymcache.logging import logger
from fastsymcache.lookup import search_symbol_file, search_symbol_files
from fastsymcache.routes import sym

__all__ = ["app", "create_app", "search_symbol_file", "search_symbol_files"]


def create_app():
    """ Create the application context """

    # instantiate FastAPI
    app = FastAPI()

    # Symbol API
    app.include_router(sym)

    logger.info("Starting FastSymCache proxy...")

    return app


app = create_app()


@app.get("/health")
def health_check():
    return {"status": "ok"}


def main():
    """Entry point for the symbol proxy when run via uv or pip."""
    import uvicorn
    uvicorn.run("fastsymcache:app", host="0.0.0.0", port=8000, reload=False)
