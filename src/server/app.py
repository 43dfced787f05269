from __future__ import annotations

import asyncio
import contextlib
import json
import os
from typing import Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from simulation import ElevatorSystem, InvalidRequest, Overloaded, PickupRequest, SystemConfig


class PickupRequestModel(BaseModel):
    origin: int
    destination: int


def config_from_env() -> SystemConfig:
    return SystemConfig(
        capacity=int(os.environ.get("LIFTDISPATCH_CAPACITY", "4")),
        step_period=float(os.environ.get("LIFTDISPATCH_STEP_PERIOD", "1.0")),
    )


class SystemManager:
    def __init__(self, config: SystemConfig) -> None:
        self.config = config
        self.system: Optional[ElevatorSystem] = None
        self.clients: Set[WebSocket] = set()
        self._stream_task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self.system is None:
            self.system = ElevatorSystem.from_config(self.config)
            self.system.start()
            self._stream_task = asyncio.create_task(self._stream())

    async def stop(self) -> None:
        if self._stream_task:
            self._stream_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._stream_task
            self._stream_task = None
        if self.system:
            await self.system.stop()
            self.system = None

    def _require_system(self) -> ElevatorSystem:
        if self.system is None:
            raise HTTPException(status_code=503, detail="Elevator system is not running")
        return self.system

    async def _stream(self) -> None:
        system = self._require_system()
        version = system.store.version
        while True:
            await system.store.wait_for_change(version)
            version = system.store.version
            await self.broadcast(self.current_state())

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
        system = self._require_system()
        deferred = system.deferred()
        return {
            "fleet": [elevator.to_dict() for elevator in system.store.snapshot],
            "backlog": system.request_backlog_size(),
            "deferred": None
            if deferred is None
            else {
                **deferred.request.to_dict(),
                "age": deferred.age(asyncio.get_running_loop().time()),
            },
        }

    async def submit(self, origin: int, destination: int) -> dict:
        system = self._require_system()
        system.submit_request_nowait(PickupRequest(origin, destination))
        return {"backlog": system.request_backlog_size()}

    def backlog(self) -> dict:
        return {"size": self._require_system().request_backlog_size()}


manager = SystemManager(config_from_env())
app = FastAPI(title="LiftDispatch API")
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


@app.post("/requests", status_code=202)
async def submit_request(request: PickupRequestModel) -> dict:
    try:
        return await manager.submit(request.origin, request.destination)
    except Overloaded as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    except InvalidRequest as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.get("/requests/backlog")
async def get_backlog() -> dict:
    return manager.backlog()


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
