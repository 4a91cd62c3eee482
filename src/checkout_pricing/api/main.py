import logging
from decimal import Decimal

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from checkout_pricing import __version__
from checkout_pricing.engine import Checkout, MeasuredQuantity, Unit
from checkout_pricing.errors import InvalidArgument, PriceCalculationError
from checkout_pricing.api.rules_api import router as rules_router
from checkout_pricing.api.state import registry, settings

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Checkout Pricing API",
    description="Scan articles into checkout sessions and price them with tiered rules",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rules inspection API
app.include_router(rules_router)


class ScanRequest(BaseModel):
    sku: str
    unit: str = Unit.QUANTITY.value
    amount: Decimal = Decimal(1)


class ScanBatchRequest(BaseModel):
    skus: list[str]


def _get_checkout(checkout_id: str) -> Checkout:
    try:
        return registry.get(checkout_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Checkout {checkout_id} not found")


def _pricing_error(e: PriceCalculationError) -> HTTPException:
    return HTTPException(status_code=409, detail={"error_code": e.error_code, "message": e.explanation})


@app.get("/")
async def root():
    return {"status": "online", "message": "Checkout Pricing API Active"}


@app.post("/checkouts", status_code=201)
async def create_checkout():
    checkout_id = registry.create()
    logger.info("Opened checkout %s", checkout_id)
    return {"checkout_id": checkout_id}


@app.post("/checkouts/{checkout_id}/scan")
async def scan(checkout_id: str, req: ScanRequest):
    checkout = _get_checkout(checkout_id)
    try:
        checkout.record(req.sku, MeasuredQuantity(req.unit, req.amount))
    except InvalidArgument as e:
        raise HTTPException(status_code=422, detail=e.explanation)
    return {"checkout_id": checkout_id, "articles": len(checkout.cart)}


@app.post("/checkouts/{checkout_id}/scan-batch")
async def scan_batch(checkout_id: str, req: ScanBatchRequest):
    checkout = _get_checkout(checkout_id)
    try:
        checkout.record_all(req.skus)
    except InvalidArgument as e:
        raise HTTPException(status_code=422, detail=e.explanation)
    return {"checkout_id": checkout_id, "articles": len(checkout.cart)}


@app.get("/checkouts/{checkout_id}/total")
async def get_total(checkout_id: str):
    checkout = _get_checkout(checkout_id)
    try:
        total = checkout.total_price()
    except PriceCalculationError as e:
        raise _pricing_error(e)
    except InvalidArgument as e:
        raise HTTPException(status_code=422, detail=e.explanation)
    return {"checkout_id": checkout_id, "total": str(total)}


@app.get("/checkouts/{checkout_id}/breakdown")
async def get_breakdown(checkout_id: str):
    checkout = _get_checkout(checkout_id)
    try:
        result = checkout.calculate()
    except PriceCalculationError as e:
        raise _pricing_error(e)
    except InvalidArgument as e:
        raise HTTPException(status_code=422, detail=e.explanation)
    return {"checkout_id": checkout_id, **result.to_dict()}


@app.post("/checkouts/{checkout_id}/reset")
async def reset_checkout(checkout_id: str):
    _get_checkout(checkout_id).reset()
    return {"checkout_id": checkout_id, "articles": 0}


@app.delete("/checkouts/{checkout_id}", status_code=204)
async def close_checkout(checkout_id: str):
    try:
        registry.remove(checkout_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Checkout {checkout_id} not found")
    logger.info("Closed checkout %s", checkout_id)


@app.get("/system/status")
async def get_status():
    return {
        "engine_active": True,
        "rules_file": str(settings.rules_csv),
        "rules_count": len(registry.rule_set),
        "skus_count": len(registry.rule_set.skus),
        "open_checkouts": len(registry),
    }
