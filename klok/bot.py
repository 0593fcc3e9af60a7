"""
Scheduled chat bot.

A single asyncio loop drives the bot through explicit states: log in,
wait for the timer, run a tick, and recover from expired sessions or
the daily rate limit. Each tick finishes before the timer is re-armed.
"""

import asyncio
import random
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional
import logging

from .api.chat import ChatAPI, create_api_client
from .auth.authenticator import Authenticator
from .auth.credential_store import CredentialStore
from .config import KlokSettings
from .exceptions import ExpiredTokenError, KlokError, RateLimitError
from .utils.structured_logging import clear_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class BotState(str, Enum):
    """Scheduler loop states."""
    UNAUTHENTICATED = "unauthenticated"
    IDLE = "idle"
    TICKING = "ticking"
    REAUTHENTICATING = "reauthenticating"
    RATE_LIMITED_WAIT = "rate_limited_wait"
    TERMINATED = "terminated"


class TimerCancelledError(Exception):
    """Raised when waiting on a cancelled timer."""
    pass


class TickTimer:
    """
    Fixed-rate tick timer.

    Deadlines advance by one interval per tick; ticks missed while a
    slow tick was running are skipped rather than fired back to back.
    """

    def __init__(
        self,
        interval: float,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic
    ):
        self.interval = interval
        self._sleep = sleep
        self._clock = clock
        self._next_deadline = clock() + interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    async def wait(self) -> None:
        """
        Sleep until the next tick is due.

        Raises:
            TimerCancelledError: If the timer was cancelled
        """
        if self._cancelled:
            raise TimerCancelledError("timer cancelled")

        await self._sleep(max(0.0, self._next_deadline - self._clock()))

        if self._cancelled:
            raise TimerCancelledError("timer cancelled")

        self._next_deadline += self.interval
        now = self._clock()
        if self._next_deadline <= now:
            skipped = int((now - self._next_deadline) // self.interval) + 1
            logger.debug(f"Skipping {skipped} missed tick(s)")
            self._next_deadline += skipped * self.interval


@dataclass
class BotSession:
    """Everything that belongs to one login; replaced wholesale on restart."""
    token: str
    api: ChatAPI
    timer: TickTimer
    ticks: int = 0
    started_at: float = field(default_factory=time.time)

    def close(self) -> None:
        self.timer.cancel()
        self.api.close()


class ChatBot:
    """
    Points-farming chat bot.

    Usage:
        >>> bot = ChatBot(settings, store, authenticator)
        >>> exit_code = asyncio.run(bot.run())
    """

    def __init__(
        self,
        settings: KlokSettings,
        store: CredentialStore,
        authenticator: Authenticator,
        api_factory: Callable[[str, KlokSettings], ChatAPI] = create_api_client,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        choose: Callable[[list[str]], str] = random.choice
    ):
        """
        Initialize bot.

        Args:
            settings: Bot settings
            store: Session token cache
            authenticator: Performs wallet logins
            api_factory: Builds an API client for a session token
            sleep: Async sleep used for every wait
            clock: Monotonic clock for the tick timer
            choose: Picks the message to send
        """
        self.settings = settings
        self.store = store
        self.authenticator = authenticator
        self.api_factory = api_factory
        self._sleep = sleep
        self._clock = clock
        self._choose = choose

        self.session: Optional[BotSession] = None
        self._state = BotState.UNAUTHENTICATED
        self._stopped = False
        self._tick_lock = asyncio.Lock()

    @property
    def state(self) -> BotState:
        return self._state

    def stop(self) -> None:
        """Ask the loop to finish; it exits with status 0."""
        self._stopped = True
        if self.session:
            self.session.timer.cancel()

    async def _start_session(self, force_login: bool) -> BotSession:
        token = None if force_login else self.store.load_token()

        if token:
            logger.info("Using cached session token")
        else:
            logger.info("No usable token found. Starting authentication...")
            token = await asyncio.to_thread(self.authenticator.authenticate)

        return BotSession(
            token=token,
            api=self.api_factory(token, self.settings),
            timer=TickTimer(self.settings.chat_interval, sleep=self._sleep, clock=self._clock)
        )

    def _end_session(self) -> None:
        if self.session:
            self.session.close()
            self.session = None

    async def tick(self, session: BotSession) -> None:
        """
        Run one tick: check points, send a message, report the balance.

        Raises:
            ExpiredTokenError: Session token rejected
            RateLimitError: Daily chat limit reached
        """
        if self._tick_lock.locked():
            logger.warning("Previous tick still running. Skipping...")
            return

        async with self._tick_lock:
            session.ticks += 1
            set_correlation_id(prefix="tick")
            try:
                points = await asyncio.to_thread(session.api.check_points)
                if points is None or points.total_points <= 0:
                    logger.info("No points available. Skipping...")
                    return

                message = self._choose(self.settings.messages)
                logger.info(f"Sending message: {message}")
                await asyncio.to_thread(session.api.send_message, message)

                updated = await asyncio.to_thread(session.api.check_points)
                if updated is None:
                    logger.warning("Remaining Points: unknown")
                else:
                    logger.info(f"Remaining Points: {updated.total_points}")
            finally:
                clear_correlation_id()

    async def run(self) -> int:
        """
        Run until stopped or startup retries are exhausted.

        Returns:
            Process exit code
        """
        startup_failures = 0
        force_login = False
        self._state = BotState.UNAUTHENTICATED

        while not self._stopped:
            if self._state is BotState.UNAUTHENTICATED:
                try:
                    self.session = await self._start_session(force_login)
                except KlokError as e:
                    startup_failures += 1
                    logger.error(
                        f"Startup error (retry {startup_failures}/{self.settings.max_retries}): "
                        f"{e.message}"
                    )
                    if startup_failures > self.settings.max_retries:
                        logger.error("Maximum retries reached. Exiting...")
                        self._state = BotState.TERMINATED
                        return 1
                    await self._sleep(self.settings.retry_delay)
                    continue

                startup_failures = 0
                force_login = False
                logger.info("Bot started successfully")
                self._state = BotState.IDLE

            elif self._state is BotState.IDLE:
                try:
                    await self.session.timer.wait()
                except TimerCancelledError:
                    continue
                self._state = BotState.TICKING

            elif self._state is BotState.TICKING:
                try:
                    await self.tick(self.session)
                    self._state = BotState.IDLE
                except ExpiredTokenError:
                    self.session.timer.cancel()
                    logger.warning("Token expired. Renewing authentication...")
                    self._state = BotState.REAUTHENTICATING
                except RateLimitError:
                    self.session.timer.cancel()
                    hours = self.settings.rate_limit_delay / 3600
                    logger.warning(f"Daily limit exceeded. Restarting in {hours:g} hours...")
                    self._state = BotState.RATE_LIMITED_WAIT
                except Exception as e:
                    logger.error(f"Tick failed: {type(e).__name__}: {e}", exc_info=True)
                    self._state = BotState.IDLE

            elif self._state is BotState.REAUTHENTICATING:
                await self._sleep(self.settings.retry_delay)
                self._end_session()
                force_login = True
                self._state = BotState.UNAUTHENTICATED

            elif self._state is BotState.RATE_LIMITED_WAIT:
                await self._sleep(self.settings.rate_limit_delay)
                self._end_session()
                self._state = BotState.UNAUTHENTICATED

        self._end_session()
        self._state = BotState.TERMINATED
        logger.info("Bot stopped")
        return 0
