"""Prompt gateway contract and the default OpenAI-compatible implementation."""

from ceo_board.gateway.base import GatewayReply, ModelClient, PromptGateway
from ceo_board.gateway.model_client_gateway import ModelClientGateway, response_file_name

__all__ = [
    "GatewayReply",
    "ModelClient",
    "ModelClientGateway",
    "PromptGateway",
    "response_file_name",
]
