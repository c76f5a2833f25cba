from __future__ import annotations

import asyncio
import contextlib
import json
from dataclasses import asdict
from typing import Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simulation import Building, CarConfig, Simulation


class AlgorithmSelection(BaseModel):
    name: str


class CabinRequestBody(BaseModel):
    floor: int


class HallCallBody(BaseModel):
    floor: int
    direction: str


class SpawnBatchRequest(BaseModel):
    origin: int
    count: int = 1
    destination: Optional[int] = None


class SimulationManager:
    def __init__(
        self,
        config: Optional[CarConfig] = None,
        tick_interval: float = 0.016,
        spawn_passengers: bool = True,
    ) -> None:
        building = Building(config=config)
        self.simulation = Simulation(building=building, spawn_passengers=spawn_passengers)
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def building(self) -> Building:
        return self.simulation.building

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        step_ms = int(self.tick_interval * 1000)
        while True:
            async with self._lock:
                self.simulation.step(step_ms)
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        metrics = asdict(self.simulation.metrics.snapshot(self.simulation.current_time))
        return {
            "time": self.simulation.current_time,
            "building": self.building.snapshot(),
            "metrics": metrics,
            "selector": self.building.selector_name,
        }

    async def set_selector(self, name: str) -> dict:
        async with self._lock:
            self.building.set_selector(name)
            return self.current_state()

    async def submit_cabin_request(self, floor: int) -> dict:
        async with self._lock:
            accepted = self.building.submit_cabin_request(floor)
            state = self.current_state()
            state["accepted"] = accepted
            return state

    async def submit_hall_call(self, floor: int, direction: str) -> dict:
        async with self._lock:
            accepted = self.building.submit_hall_call(floor, direction)
            state = self.current_state()
            state["accepted"] = accepted
            return state

    async def spawn_batch(self, origin: int, count: int, destination: Optional[int]) -> dict:
        async with self._lock:
            spawned = self.simulation.spawn_passenger_batch(origin, count, destination)
            state = self.current_state()
            state["spawned"] = spawned
            return state


manager = SimulationManager()
app = FastAPI(title="Single-car elevator simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/algorithm")
async def set_algorithm(selection: AlgorithmSelection) -> dict:
    try:
        return await manager.set_selector(selection.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/cabin")
async def press_cabin_button(body: CabinRequestBody) -> dict:
    try:
        return await manager.submit_cabin_request(body.floor)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/hall")
async def press_hall_button(body: HallCallBody) -> dict:
    try:
        return await manager.submit_hall_call(body.floor, body.direction)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/passengers/spawn")
async def spawn_batch(request: SpawnBatchRequest) -> dict:
    try:
        return await manager.spawn_batch(request.origin, request.count, request.destination)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
