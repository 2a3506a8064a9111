import asyncio
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, HTTPException, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from .db.mock_provider import MockPropertyProvider
from .models.property import AddressDetails
from .models.response import PropertyDataResponse
from .services.assembler import create_property_data_response, transform_valuation_range
from .services.batch_service import batch_assemble_report
from .services.comps_service import DEFAULT_LIMIT, summarize_comparables
from .utils.logging import get_logger

LOGGER = get_logger("api")

app = FastAPI(title="Appraisal Hub property data")
router = APIRouter(prefix="/api")
provider = MockPropertyProvider(fail_ids=[i for i in os.getenv("MOCK_FAIL_IDS", "").split(",") if i])
BATCH_MAX_CONCURRENT = int(os.getenv("BATCH_MAX_CONCURRENT", "5"))


class PropertyDataRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_id: Optional[str] = None
    address: Optional[str] = None
    suburb: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=50)


class BatchRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    property_ids: List[str] = Field(..., min_length=1, max_length=100)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=50)


async def _resolve_address(req: PropertyDataRequest):
    if req.address:
        matched = await provider.match_address(req.address, req.suburb, req.city)
        details = matched.to_address_details()
        if req.postcode:
            details = details.model_copy(update={"postcode": req.postcode})
        return req.property_id or matched.property_id, details
    return req.property_id, AddressDetails(
        address=f"Property {req.property_id}", suburb=req.suburb, city=req.city, postcode=req.postcode
    )


@router.post("/property-data")
async def property_data(req: PropertyDataRequest):
    if not req.property_id and not req.address:
        raise HTTPException(400, detail="address or propertyId required")

    try:
        property_id, address = await _resolve_address(req)
        attributes, sales, avm = await asyncio.gather(
            provider.get_property_attributes(property_id),
            provider.get_sales_history(property_id),
            provider.get_avm(property_id),
        )
        suburb = address.suburb or (sales[0].suburb if sales else None) or "Unknown"
        city = address.city or (sales[0].city if sales else None) or "Unknown"
        address = address.model_copy(update={"suburb": suburb, "city": city})
        stats = await provider.get_market_statistics({"suburb": suburb, "city": city})
    except Exception as exc:
        LOGGER.error("provider_request_failed property_id=%s error=%s", req.property_id, exc)
        failed = PropertyDataResponse.fail(f"Failed to fetch property data: {exc}")
        return JSONResponse(status_code=502, content=failed.to_api())

    response = create_property_data_response(property_id, attributes, address, sales, avm, stats, limit=req.limit)
    payload = response.to_api()
    if response.success:
        payload["propertyId"] = property_id
        payload["valuation"] = transform_valuation_range(avm).to_api()
        summary = summarize_comparables(response.data.comparable_properties)
        payload["comparableSummary"] = jsonable_encoder(summary)
    return payload


@router.post("/property-data/batch")
async def property_data_batch(req: BatchRequest):
    report = await batch_assemble_report(
        req.property_ids,
        provider.get_property_attributes,
        provider.get_sales_history,
        provider.get_avm,
        provider.get_market_statistics,
        limit=req.limit,
        max_concurrent=BATCH_MAX_CONCURRENT,
    )
    return {
        "results": {pid: resp.to_api() for pid, resp in report.results.items()},
        "successCount": report.success_count,
        "errorCount": report.error_count,
    }


@router.get("/address-suggestions")
def address_suggestions(q: str = Query(..., min_length=3)):
    return {"items": [jsonable_encoder(s) for s in provider.suggest_addresses(q)]}


@router.get("/health")
def health(): return {"status": "ok"}


app.include_router(router)
