from .model_gateway import ModelGateway
from .blueprint_store import BlueprintResult, BlueprintStore
from .interview_client import HttpInterviewBackend

__all__ = [
    "ModelGateway",
    "BlueprintStore",
    "BlueprintResult",
    "HttpInterviewBackend",
]
