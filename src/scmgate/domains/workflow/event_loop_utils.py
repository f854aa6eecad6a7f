# -
# #%L
# Contrast AI SmartFix
# %%
# Copyright (C) 2025 Contrast Security, Inc.
# %%
# Contact: support@contrastsecurity.com
# License: Commercial
# NOTICE: This Software and the patented inventions embodied within may only be
# used as part of Contrast Security's commercial offerings. Even though it is
# made available through public repositories, use of this Software is subject to
# the applicable End User Licensing Agreement found at
# https://www.contrastsecurity.com/enduser-terms-0317a or as otherwise agreed
# between Contrast Security and the End User. The Software may not be reverse
# engineered, modified, repackaged, sold, redistributed or otherwise used in a
# way not consistent with the End User License Agreement.
# #L%
#

"""
Event Loop Utilities Module

Runs the git command coroutines from synchronous code in a fresh,
platform-appropriate event loop.
"""

import asyncio
import platform

from src.utils import debug_log, log

MAX_PENDING_TASKS = 100
PENDING_TASK_TIMEOUT = 0.5


def _configure_event_loop_policy():
    # The SelectorEventLoop on Windows doesn't support subprocesses, which git needs
    if platform.system() != 'Windows':
        return
    try:
        asyncio.set_event_loop_policy(asyncio.WindowsProactorEventLoopPolicy())
        debug_log("Explicitly set WindowsProactorEventLoopPolicy for subprocess support")
    except AttributeError as e:
        debug_log(f"Warning: Error handling Windows event loop policy: {e}")


def run_in_event_loop(coroutine_func, *args, **kwargs):
    """
    Wrapper function to run an async coroutine in a controlled event loop.
    Handles proper setup and cleanup of the event loop and tasks.

    Args:
        coroutine_func: The async function to run
        *args, **kwargs: Arguments to pass to the coroutine function

    Returns:
        The result returned by the coroutine
    """
    _configure_event_loop_policy()

    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    debug_log(f"Created new event loop: {type(loop).__name__}")

    if platform.system() == 'Windows' and 'Proactor' not in type(loop).__name__:
        log(f"Current event loop {type(loop).__name__} is not a ProactorEventLoop, "
            "git subprocesses may not work!", is_warning=True)

    task = loop.create_task(coroutine_func(*args, **kwargs))
    try:
        return loop.run_until_complete(task)
    except BaseException:
        if not task.done():
            task.cancel()
            # Let the task unwind so running git processes are killed
            try:
                loop.run_until_complete(task)
            except (asyncio.CancelledError, Exception) as e:
                debug_log(f"Task ended during cancellation with: {e!r}")
        raise
    finally:
        _shutdown_loop(loop)


def _shutdown_loop(loop):
    pending = [task for task in asyncio.all_tasks(loop) if not task.done()]

    if len(pending) > MAX_PENDING_TASKS:
        log(f"{len(pending)} pending tasks exceeds limit of {MAX_PENDING_TASKS}", is_warning=True)

    if pending:
        for task in pending:
            task.cancel()
        _, still_pending = loop.run_until_complete(
            asyncio.wait(pending, timeout=PENDING_TASK_TIMEOUT, return_when=asyncio.ALL_COMPLETED))
        if still_pending:
            log(f"Abandoned {len(still_pending)} tasks after timeout", is_warning=True)

    loop.run_until_complete(loop.shutdown_asyncgens())
    asyncio.set_event_loop(None)
    loop.close()
