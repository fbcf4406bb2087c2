from admin_backend.core.schemas.base import BaseSchema
from admin_backend.core.schemas.base_filter import BaseFilter, get_base_filter
from admin_backend.core.schemas.api_response import ApiResponse

__all__ = ["BaseSchema", "BaseFilter", "get_base_filter", "ApiResponse"]
