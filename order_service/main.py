import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from common.tracing import setup_telemetry
from order_service.catalog import Catalog
from order_service.crud import OrderStore
from order_service.database import build_engine
from order_service.notifier import Notifier
from order_service.payment import DemoPaymentVerifier
from order_service.routers import orders
from order_service.service import OrderService

# 로거 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PORT = 3000

def create_app(store: OrderStore = None, catalog: Catalog = None, verifier=None, notifier: Notifier = None) -> FastAPI:
    """Builds the API with explicitly constructed collaborators; defaults come from the environment."""
    store = store or OrderStore(build_engine())
    service = OrderService(
        store=store,
        catalog=catalog or Catalog(),
        verifier=verifier or DemoPaymentVerifier(),
        notifier=notifier or Notifier(),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # 데이터베이스 테이블 생성
        logger.info("Creating database tables for Order Service...")
        try:
            store.create_tables()
            logger.info("Order Service database tables created successfully.")
        except Exception as e:
            logger.error(f"Error creating Order Service database tables: {e}")
        yield
        store.engine.dispose()
        logger.info("Order service shut down gracefully.")

    app = FastAPI(title="eKart Order Service", lifespan=lifespan)
    app.state.order_service = service

    logger.info("Setting up OpenTelemetry...")
    setup_telemetry(app)

    app.include_router(orders.router)

    @app.get("/")
    def health_check():
        return {"status": "ok", "message": "Order service is running."}

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
