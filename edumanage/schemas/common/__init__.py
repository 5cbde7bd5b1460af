from .requests import PartialUpdate
from .responses import MutationResponse, Notice, SuccessResponse

__all__ = ["MutationResponse", "Notice", "PartialUpdate", "SuccessResponse"]
