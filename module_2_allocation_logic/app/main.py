import logging
from typing import Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from module_1_slot_detection.app.detect import setup_logging
from module_2_allocation_logic.app.settings import get_settings
from module_2_allocation_logic.core.path_scorer import intensity_level
from module_2_allocation_logic.services.parking_service import ParkingService, build_parking_service


logger = logging.getLogger(__name__)
settings = get_settings()
parking_service = build_parking_service(settings)

app = FastAPI(title="Module 2 Allocation Logic", version="0.1.0")

# Allow a browser front-end to call the API during local development.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_service() -> ParkingService:
    return parking_service


async def _read_upload(file: Optional[UploadFile]) -> Optional[bytes]:
    if file is None:
        return None
    data = await file.read()
    return data or None


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/session")
async def session_status(service: ParkingService = Depends(get_service)) -> dict:
    return jsonable_encoder(service.snapshot())


@app.post("/slots/detect")
async def detect_slots(
    file: Optional[UploadFile] = File(default=None),
    service: ParkingService = Depends(get_service),
) -> dict:
    # the detection call blocks on HTTP, keep it off the event loop
    await run_in_threadpool(service.detect_slots, await _read_upload(file))
    return jsonable_encoder(service.snapshot())


@app.post("/vehicle/detect")
async def detect_vehicle(
    file: Optional[UploadFile] = File(default=None),
    service: ParkingService = Depends(get_service),
) -> dict:
    await run_in_threadpool(service.detect_vehicle_and_allocate, await _read_upload(file))
    return jsonable_encoder(service.snapshot())


@app.post("/paths/intensities/simulate")
def simulate_intensities(service: ParkingService = Depends(get_service)) -> dict:
    # sync handler: the simulator sleeps, so let FastAPI run it in the threadpool
    service.simulate_intensities()
    return jsonable_encoder(service.snapshot())


@app.put("/paths/{path_id}/intensity")
async def set_intensity(
    path_id: int,
    value: int = Body(..., embed=True, ge=0, le=100),
    service: ParkingService = Depends(get_service),
) -> dict:
    if path_id not in {path.id for path in service.state.paths}:
        raise HTTPException(status_code=404, detail=f"Unknown path id {path_id}")
    service.set_intensity(path_id, value)
    return jsonable_encoder(service.snapshot())


@app.post("/paths/optimal")
async def optimal_path(service: ParkingService = Depends(get_service)) -> dict:
    state = service.calculate_optimal_path()
    if state.optimal_path is not None:
        logger.info("Optimal path selected: %s", state.optimal_path.name)
    return jsonable_encoder(service.snapshot())


@app.get("/paths/comparison")
async def path_comparison(service: ParkingService = Depends(get_service)) -> list[dict]:
    rows = []
    for path in service.comparison():
        rows.append(
            {
                **path.model_dump(),
                "intensity_level": intensity_level(path.vehicle_intensity or 0),
            }
        )
    return jsonable_encoder(rows)


@app.post("/session/reset", status_code=204)
async def session_reset(service: ParkingService = Depends(get_service)) -> None:
    service.reset()


def serve() -> None:
    setup_logging(settings.log_format)
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")


if __name__ == "__main__":
    serve()
