from __future__ import annotations

TOOL_VERSION = "1.0.0"


class Abi2RsError(Exception):
    pass


class TypeTokenError(Abi2RsError):
    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"Invalid type token '{token}': {reason}")
        self.token = token
        self.reason = reason


class MissingDefinitionError(Abi2RsError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"missing definition for non primitive type: {type_name}")
        self.type_name = type_name


class AbiFormatError(Abi2RsError):
    pass


class ConfigError(Abi2RsError):
    pass
