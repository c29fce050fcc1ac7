"""Command-line entry point for the support chat service.

RUN_MODE picks how the service is served:

- integrated (default): one uvicorn server on PORT with the API under /api
  and the NiceGUI widget mounted at /
- separate: the API on PORT and the standalone widget on WIDGET_PORT, each in
  its own process; the widget reaches the API through API_BASE_URL
"""

import logging
import os
import subprocess
import sys
import time

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
RUN_MODES = ("integrated", "separate")


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_integrated_app() -> FastAPI:
    """Create the API app with the widget page mounted at /."""
    from nicegui import ui

    from support_chat.api.app import create_app
    from support_chat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()
    ui.run_with(
        app,
        title="Support",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "support-chat-secret"),
    )
    return app


def run_integrated(host: str, port: int) -> None:
    import uvicorn

    app = build_integrated_app()
    logger.info(f"Serving widget and API on http://{host}:{port} (docs at /docs)")
    uvicorn.run(app, host=host, port=port, log_level=os.getenv("LOG_LEVEL", "info").lower())


def widget_environment(api_port: int) -> dict[str, str]:
    """Environment for the widget process, pointed at the locally started API."""
    env = dict(os.environ)
    env["API_BASE_URL"] = f"http://localhost:{api_port}"
    return env


def run_separate(host: str, port: int, widget_port: int) -> None:
    """Run API and widget as child processes until either exits or Ctrl-C."""
    env = widget_environment(port)
    env["WIDGET_PORT"] = str(widget_port)

    processes = [
        subprocess.Popen(
            [
                sys.executable,
                "-m",
                "uvicorn",
                "support_chat.api.app:app",
                "--host",
                host,
                "--port",
                str(port),
            ]
        ),
        subprocess.Popen([sys.executable, "-m", "support_chat.ui.chat_page"], env=env),
    ]
    logger.info(f"API on port {port}, widget on port {widget_port}")

    try:
        while all(process.poll() is None for process in processes):
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for process in processes:
            if process.poll() is None:
                process.terminate()
        for process in processes:
            process.wait()


def main() -> None:
    configure_logging()

    mode = os.getenv("RUN_MODE", "integrated").lower()
    if mode not in RUN_MODES:
        logger.warning(f"Unknown RUN_MODE {mode!r}, falling back to integrated")
        mode = "integrated"

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting Support Chat in {mode} mode")

    if mode == "separate":
        run_separate(host, port, int(os.getenv("WIDGET_PORT", "8080")))
    else:
        run_integrated(host, port)


if __name__ == "__main__":
    main()
