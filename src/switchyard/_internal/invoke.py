"""Call user code that may be either ``def`` or ``async def``.

Route handlers, error handlers and lifecycle hooks all go through
``invoke`` so the sync/async distinction is handled once.
"""

import inspect
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    outcome = func(*args, **kwargs)
    return await outcome if inspect.isawaitable(outcome) else outcome
