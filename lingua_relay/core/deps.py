"""
Dependency Injection

FastAPI dependencies for routes.
"""

from typing import Annotated

from fastapi import Depends
from starlette.requests import HTTPConnection

from lingua_relay.realtime.manager import ConnectionManager
from lingua_relay.services.relay import RelayHub


def get_relay(conn: HTTPConnection) -> RelayHub:
    return conn.app.state.relay


def get_connections(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.connections


RelayDep = Annotated[RelayHub, Depends(get_relay)]
ConnectionsDep = Annotated[ConnectionManager, Depends(get_connections)]
