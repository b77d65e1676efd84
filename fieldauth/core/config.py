"""
Configuration module for fieldauth.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigurationError
from ..util.config import get_bool_config, get_config_value


@dataclass(frozen=True)
class Config:
    """Settings shared by every protected field"""
    # Context entry that must be truthy for an authenticated caller; None disables the gate
    user_field: Optional[str] = "user"
    # False keeps the historical behaviour where GREATER_THAN passes on equality
    strict_greater_than: bool = True
    log_denials: bool = True

    def __post_init__(self):
        self.validate()

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables"""
        user_field = get_config_value("user_field", "user")
        return cls(
            user_field=user_field.strip() or None,
            strict_greater_than=get_bool_config("strict_greater_than", True),
            log_denials=get_bool_config("log_denials", True),
        )

    def validate(self) -> bool:
        """Validate the configuration"""
        if self.user_field is not None and not isinstance(self.user_field, str):
            raise ConfigurationError(
                f"user_field must be a string or None, got {type(self.user_field).__name__}"
            )
        if not isinstance(self.strict_greater_than, bool):
            raise ConfigurationError("strict_greater_than must be a boolean")
        if not isinstance(self.log_denials, bool):
            raise ConfigurationError("log_denials must be a boolean")
        return True
