"""API route handlers for the symbol proxy.

Single Responsibility: This module defines the HTTP API endpoints
and delegates the lookup itself to the lookup module.

Dependency Inversion: Route handlers get the symbol path through
FastAPI's Depends rather than reading configuration directly.
"""

from fastapi import APIRouter, Depends, Response

from fastsymcache.archive import extract_symbol
from fastsymcache.config import SYMBOL_PATH
from fastsymcache.errors import InvalidArtifactKeyError, SymbolLookupError, TransportError
from fastsymcache.logging import logger
from fastsymcache.lookup import search_symbol_file

sym = APIRouter()


def get_symbol_path() -> str | None:
    return SYMBOL_PATH


def get_symbol(file_name: str, debug_id: str, requested: str, symbol_path: str | None) -> Response:
    """Core logic for serving a symbol file through the proxy."""
    # Payloads are always served decompressed, so compressed variants are never available.
    if requested != file_name:
        logger.debug(f"Not serving {requested} for {file_name}")
        return Response(status_code=404)

    try:
        content, _ = search_symbol_file(file_name, debug_id, symbol_path)
        # Cache hits hold the bytes as the server sent them
        if content is not None:
            content = extract_symbol(content, file_name)
    except InvalidArtifactKeyError as e:
        logger.error(f"Invalid parameters in get_symbol: {e}")
        return Response(status_code=400, content=f"Invalid parameters: {e}")
    except TransportError as e:
        logger.error(f"No symbol server reachable for {file_name}/{debug_id}: {e}")
        return Response(status_code=502, content="Symbol servers unreachable")
    except SymbolLookupError as e:
        logger.error(f"Lookup error in get_symbol: {e}")
        return Response(status_code=500, content="Internal server error")

    if content is None:
        return Response(status_code=404)

    return Response(content=content, media_type="application/octet-stream")


@sym.get("/{file_name}/{debug_id}/{requested}")
@sym.get("/download/symbols/{file_name}/{debug_id}/{requested}")
def get_symbol_api(
    file_name: str,
    debug_id: str,
    requested: str,
    symbol_path: str | None = Depends(get_symbol_path),
) -> Response:
    """API endpoint for retrieving symbol files."""
    return get_symbol(file_name, debug_id, requested, symbol_path)
