from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_tracker.api.errors import register_exception_handlers
from finance_tracker.api.routes import analytics, budgets, pages, transactions
from finance_tracker.core import settings
from finance_tracker.integration.store import DocumentStore, JsonDocumentStore
from finance_tracker.logger import get_logger, setup_logging
from finance_tracker.services.budgeting import BudgetService
from finance_tracker.services.ledger import TransactionService
from finance_tracker.services.reporting import ReportingService

logger = get_logger(__name__)


def create_app(store: DocumentStore | None = None) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        document_store = store or JsonDocumentStore(data_dir=settings.DATA_DIR, name=settings.DB_NAME)
        await document_store.connect()

        transaction_service = TransactionService(document_store)
        budget_service = BudgetService(document_store)

        app.state.store = document_store
        app.state.transactions = transaction_service
        app.state.budgets = budget_service
        app.state.reporting = ReportingService(transaction_service, budget_service)

        logger.info("Services initialized.")
        try:
            yield
        finally:
            logger.info("Service shutting down.")
            await document_store.close()

    app = FastAPI(title="Finance Tracker", lifespan=lifespan)
    register_exception_handlers(app)

    app.include_router(transactions.router)
    app.include_router(budgets.router)
    app.include_router(analytics.router)
    app.include_router(pages.router)

    return app


app = create_app()
