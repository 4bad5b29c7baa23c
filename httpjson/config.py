from typing import Optional

from pydantic import BaseModel

from httpjson.options import JsonSerializerOptions


class HttpJsonConfig(BaseModel):
    """
    Application-level configuration for the JSON helpers.
    """

    json_logging: bool = False
    # level name for the "httpjson" logger, e.g. "DEBUG"
    log_level: str = "INFO"
    # replaces the defaults for the whole application when set
    serializer_options: Optional[JsonSerializerOptions] = None
