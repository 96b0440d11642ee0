HELP = """
TOPIC: help
===========

How to use the absurdio help system.

USAGE:
    absurdio help              Show this message
    absurdio help <topic>      Show detailed info about a topic

TOPICS:
    absurdio help overview     What absurdio is and the failure taxonomy
    absurdio help absurd       Re-typing never-returning awaitables
    absurdio help supervise    Fail-fast groups of forever-running tasks
    absurdio help settings     Environment variables and .env files

DEMO:
    absurdio demo              Heartbeat + counter group; exits 1 when the counter fails

All output is plain text with consistent structure. No menus, no interactive prompts.
"""
