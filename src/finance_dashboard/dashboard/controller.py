import asyncio
from typing import Optional

from loguru import logger

from finance_dashboard.aggregation import DashboardSummary, TrendPolicy, summarize
from finance_dashboard.auth.session import AuthProvider
from finance_dashboard.dashboard.results import (
    AuthMissing,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    QueryFailed,
    QuerySource,
)
from finance_dashboard.dashboard.state import (
    DashboardState,
    DashboardEvent,
    FetchCancelled,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    TransactionAdded,
    reduce,
)
from finance_dashboard.domain.models import NewTransaction, Transaction
from finance_dashboard.presentation.notifications import Notifier
from finance_dashboard.repositories.base import TransactionStore

class TransactionInsertError(Exception):
    """Raised when a new transaction is rejected or can't be stored."""
    pass

class ControllerClosedError(Exception):
    """Raised when a closed controller is asked to do more work."""
    pass

class DashboardController:
    """
    Drives the dashboard: fetch, aggregate, and refetch after a change.

    Every fetch cycle reads the signed-in user's most recent transactions and
    all categories concurrently. Both must succeed; otherwise a single error
    notification is shown and the state moves to error. Adding a transaction
    always triggers a full refetch, there is no optimistic update.

    Usage:
        controller = DashboardController(store, auth, notifier)
        await controller.load()
        print(controller.summary)
    """

    def __init__(
        self,
        store: TransactionStore,
        auth: AuthProvider,
        notifier: Notifier,
        recent_limit: int = 20,
        fallback_color: Optional[str] = None,
        trend_policy: TrendPolicy = TrendPolicy.DIVISOR_FALLBACK,
    ):
        self.store = store
        self.auth = auth
        self.notifier = notifier
        self.recent_limit = recent_limit
        self.fallback_color = fallback_color
        self.trend_policy = trend_policy

        self._state = DashboardState()
        self._fetch_task: Optional[asyncio.Task] = None
        self._closed = False

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def summary(self) -> DashboardSummary:
        """Aggregator output for the data currently held"""
        return summarize(
            self._state.transactions,
            self._state.categories,
            fallback_color=self.fallback_color,
            trend_policy=self.trend_policy,
        )

    def dispatch(self, event: DashboardEvent) -> DashboardState:
        """Apply an event, ignoring it once the controller is closed"""
        if self._closed:
            logger.debug("Dropping {} after close", type(event).__name__)
            return self._state

        previous = self._state.status
        self._state = reduce(self._state, event)
        logger.debug(
            "Dashboard {} -> {} on {}",
            previous.value, self._state.status.value, type(event).__name__,
        )
        return self._state

    async def load(self) -> FetchResult:
        """
        Run one fetch cycle.

        Returns:
            FetchSuccess with the fetched data, or FetchFailure with the error

        Raises:
            ControllerClosedError: If close() was already called
            asyncio.CancelledError: If the fetch was cancelled
        """
        self._ensure_open()
        self.dispatch(FetchStarted())
        return await self._run_fetch()

    async def add_transaction(self, new: NewTransaction) -> Transaction:
        """
        Store a new transaction, then refetch everything.

        Works in any dashboard state; a fetch already in flight is cancelled
        and replaced by the refetch.

        Args:
            new: Insert payload

        Returns:
            The stored transaction

        Raises:
            TransactionInsertError: If validation or the insert fails
        """
        self._ensure_open()

        try:
            new.validate()
            user = await asyncio.to_thread(self.auth.get_current_user)
            if user is None:
                raise TransactionInsertError(AuthMissing().message)
            transaction = await self.store.add_transaction(user.id, new)
        except TransactionInsertError as e:
            self.notifier.error(str(e))
            raise
        except Exception as e:
            self.notifier.error(str(e))
            raise TransactionInsertError(str(e)) from e

        logger.info("Added {}", transaction)
        self.notifier.notify("Success", "Transaction added successfully")

        self._supersede_fetch()
        self.dispatch(TransactionAdded(transaction))
        await self._run_fetch()
        return transaction

    def cancel(self) -> bool:
        """
        Cancel the fetch in flight, if any.

        Returns:
            True if a fetch was cancelled
        """
        if self._fetch_task is None or self._fetch_task.done():
            return False
        self._fetch_task.cancel()
        return True

    def close(self) -> None:
        """Tear down: cancel any fetch and stop accepting state changes"""
        self.cancel()
        self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise ControllerClosedError("Dashboard controller is closed")

    def _supersede_fetch(self) -> None:
        """Abandon the fetch in flight so a newer one can replace it"""
        task, self._fetch_task = self._fetch_task, None
        if task is not None and not task.done():
            logger.debug("Cancelling superseded dashboard fetch")
            task.cancel()

    async def _run_fetch(self) -> FetchResult:
        task = asyncio.ensure_future(self._fetch())
        self._fetch_task = task
        try:
            result = await task
        except asyncio.CancelledError:
            # A superseded fetch leaves the state to the fetch that replaced it
            if self._fetch_task is task:
                self._fetch_task = None
                logger.info("Dashboard fetch cancelled")
                self.dispatch(FetchCancelled())
            raise

        if self._fetch_task is not task:
            logger.debug("Discarding result of superseded dashboard fetch")
            return result
        self._fetch_task = None

        if isinstance(result, FetchSuccess):
            logger.info(
                "Loaded {} transactions and {} categories",
                len(result.transactions), len(result.categories),
            )
            self.dispatch(FetchSucceeded(result.transactions, result.categories))
        else:
            logger.warning("Dashboard fetch failed: {}", result.message)
            if not self._closed:
                self.notifier.error(result.message)
            self.dispatch(FetchFailed(result.error))

        return result

    async def _fetch(self) -> FetchResult:
        try:
            user = await asyncio.to_thread(self.auth.get_current_user)
        except Exception as e:
            return FetchFailure(AuthMissing(message=str(e)))
        if user is None:
            return FetchFailure(AuthMissing())

        logger.debug("Fetching dashboard data for {}", user.email)
        queries = {
            QuerySource.TRANSACTIONS: asyncio.ensure_future(
                self.store.recent_transactions(user.id, limit=self.recent_limit)
            ),
            QuerySource.CATEGORIES: asyncio.ensure_future(self.store.list_categories()),
        }

        try:
            await asyncio.wait(queries.values(), return_when=asyncio.FIRST_EXCEPTION)
        finally:
            pending = [task for task in queries.values() if not task.done()]
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        # Report the transactions query first when both fail
        for source, task in queries.items():
            if task.cancelled():
                continue
            error = task.exception()
            if error is not None:
                return FetchFailure(QueryFailed(source=source, message=str(error)))

        return FetchSuccess(
            transactions=queries[QuerySource.TRANSACTIONS].result(),
            categories=queries[QuerySource.CATEGORIES].result(),
        )
