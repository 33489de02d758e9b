"""Global async lock for browser access.

Screen captures launch a full Chromium; at most one runs at a time per
process. Every capture must acquire this lock before launching a browser.
"""

import asyncio

browser_lock = asyncio.Lock()
