"""
Async test helpers for polling a running capture session.
"""

import asyncio


async def wait_until(predicate, timeout: float = 3.0, interval: float = 0.005) -> None:
    """Poll until predicate() is true (raises asyncio.TimeoutError)"""

    async def _poll():
        while not predicate():
            await asyncio.sleep(interval)

    await asyncio.wait_for(_poll(), timeout)


async def wait_for_phase(session, label: str, timeout: float = 3.0) -> None:
    """Wait until the session's phase label equals `label`"""
    await wait_until(lambda: session.phase.label == label, timeout)


async def wait_for_email_status(session, status: str, timeout: float = 3.0) -> None:
    """Wait until the email dialog shows `status` ("input", "sending", ...)"""

    def _matches():
        if session.phase.label != "showing_email_input":
            return False
        sub = session.state.email_sub_state
        current = sub.status.value if sub else "input"
        return current == status

    await wait_until(_matches, timeout)
