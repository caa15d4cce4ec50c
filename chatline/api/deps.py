"""Per-request dependencies that read the shared clients from ``app.state``."""

from fastapi import Request

from chatline.gateway import CompletionGateway
from chatline.services import Services
from chatline.store import MessageStore


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_store(request: Request) -> MessageStore:
    return get_services(request).store


def get_gateway(request: Request) -> CompletionGateway:
    return get_services(request).gateway
