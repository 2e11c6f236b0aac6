"""
NoteVault Server Entry Point

Run with: python main.py
Or with uvicorn: uvicorn app:app --reload

Bind address, port and auto-reload come from the ``server`` section of the
configuration (NOTEVAULT_HOST, NOTEVAULT_PORT, NOTEVAULT_RELOAD).
"""

import uvicorn

from notevault.config import Config

if __name__ == "__main__":
    server = Config.from_env().server

    uvicorn.run(
        "app:app",
        host=server.host,
        port=server.port,
        reload=server.reload,
        log_level="info",
    )
