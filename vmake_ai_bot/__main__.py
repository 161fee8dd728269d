"""
Main entry point for the VMake AI Bot.
"""

import uvicorn
from .config.settings import get_settings
from .core.app import create_app


def main():
    """Start the VMake AI Bot server, with auto-reload in development."""
    settings = get_settings()
    options = {
        "host": settings.api_host,
        "port": settings.api_port,
        "log_level": settings.log_level.lower(),
    }

    if settings.api_reload and settings.environment == "development":
        # reload needs an import string, not an app object
        uvicorn.run("vmake_ai_bot.core.app:create_app", factory=True, reload=True, **options)
    else:
        uvicorn.run(create_app(settings), reload=False, **options)


if __name__ == "__main__":
    main()
