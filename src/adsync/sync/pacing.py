"""Fixed request spacing between window fetches and between projects."""
import asyncio


class PacingController:
    """
    Two constant delays, no adaptive backoff.

    Pass zeros for both to disable pacing (manual runs, tests).
    """

    def __init__(self, window_delay: float = 10.0, project_delay: float = 30.0):
        if window_delay < 0 or project_delay < 0:
            raise ValueError("Pacing delays cannot be negative")
        self.window_delay = window_delay
        self.project_delay = project_delay

    async def after_window(self) -> None:
        if self.window_delay:
            await asyncio.sleep(self.window_delay)

    async def after_project(self) -> None:
        if self.project_delay:
            await asyncio.sleep(self.project_delay)

    @classmethod
    def from_settings(cls, settings) -> "PacingController":
        return cls(
            window_delay=settings.window_delay_seconds,
            project_delay=settings.project_delay_seconds,
        )
