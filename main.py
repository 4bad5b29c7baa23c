import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import uvicorn
from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from pydantic import BaseModel

from httpjson.config import HttpJsonConfig
from httpjson.fastapi_utils import add_exception_handlers
from httpjson.fastapi_utils import get_json_options
from httpjson.fastapi_utils import json_body
from httpjson.fastapi_utils import lifespan_manager
from httpjson.options import JsonOptions
from httpjson.request import read_from_json
from httpjson.response import json_response_for
from httpjson.response import write_as_json

logging.basicConfig(level=logging.INFO)

# ─────────────────────────────────────────────────────────────────────────────
# 0. Payload models
# ─────────────────────────────────────────────────────────────────────────────


class Prescription(BaseModel):
    patient_name: str
    drugs: List[str]
    note: Optional[str] = None


class PrescriptionSummary(BaseModel):
    patient_name: str
    drug_count: int
    note: Optional[str] = None


# ─────────────────────────────────────────────────────────────────────────────
# 1. App
# ─────────────────────────────────────────────────────────────────────────────

cfg = HttpJsonConfig(json_logging=False, log_level="INFO")

app: FastAPI = FastAPI(lifespan=lifespan_manager(cfg))
add_exception_handlers(app)


@app.post("/prescriptions/summary")
async def summarize(request: Request) -> Response:
    rx: Prescription = await read_from_json(request, Prescription)
    summary = PrescriptionSummary(
        patient_name=rx.patient_name, drug_count=len(rx.drugs), note=rx.note
    )
    return await json_response_for(request, summary)


@app.post("/prescriptions/summary/pretty")
async def summarize_pretty(
    request: Request,
    rx: Prescription = json_body(Prescription),
    options: JsonOptions = Depends(get_json_options),
) -> Response:
    # only this request is affected
    options.serializer_options.write_indented = True
    options.serializer_options.ignore_null_values = True
    summary = PrescriptionSummary(
        patient_name=rx.patient_name, drug_count=len(rx.drugs), note=rx.note
    )
    return await json_response_for(request, summary)


@app.post("/echo")
async def echo(request: Request) -> Response:
    payload: Dict[str, Any] = await read_from_json(request, Dict[str, Any])
    response = Response()
    await write_as_json(response, payload)
    return response


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
