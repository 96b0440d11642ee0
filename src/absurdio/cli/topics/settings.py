SETTINGS = """
TOPIC: settings
===============

Configuration from environment variables (pydantic-settings), .env supported.

VARIABLES:
    ABSURDIO_DEBUG=true                        Force DEBUG logging
    ABSURDIO_LOG_LEVEL=INFO                    DEBUG, INFO, WARNING, ERROR, CRITICAL
    ABSURDIO_LOG_FORMAT=console                console, json, none
    ABSURDIO_LOG_COLORS=true                   Force ANSI colors on/off
    ABSURDIO_SUPERVISOR_DRAIN_TIMEOUT=1.0      Seconds cancelled tasks get to unwind (0 = don't wait)
    ABSURDIO_SUPERVISOR_GROUP_NAME=main        Default group name
    ABSURDIO_DEMO_INTERVAL=1.0                 Demo tick interval
    ABSURDIO_DEMO_FAIL_AFTER=3                 Demo counter threshold

IN CODE:
    from absurdio.foundation.config import get_settings, clear_settings_cache
    get_settings().supervisor.drain_timeout
    clear_settings_cache()                     # re-read the environment
"""
