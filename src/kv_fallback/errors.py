ExtraInfoType = dict[str, str | int | float | bool | None]


class KVFallbackError(Exception):
    """Base exception for all kv-fallback errors."""

    def __init__(self, message: str | None = None, extra_info: ExtraInfoType | None = None):
        message_parts: list[str] = []

        if message:
            message_parts.append(message)

        if extra_info:
            extra_info_str = ";".join(f"{k}: {v}" for k, v in extra_info.items())
            if message:
                extra_info_str = "(" + extra_info_str + ")"

            message_parts.append(extra_info_str)

        self.extra_info: ExtraInfoType = extra_info or {}

        super().__init__(": ".join(message_parts))


class ConfigurationError(KVFallbackError):
    """Raised when store configuration is invalid or incomplete."""


class KVStoreError(KVFallbackError):
    """Base exception for store-level errors."""


class StoreSetupError(KVStoreError):
    """Raised when a store client cannot be constructed."""


class StoreConnectionError(KVStoreError):
    """Raised when unable to connect to or communicate with the underlying store."""


class KVOperationError(KVFallbackError):
    """Raised when a store operation fails."""


class WrongTypeError(KVOperationError):
    """Raised when an operation is run against a key holding the other kind of value."""

    def __init__(self, operation: str, key: str, expected: str, actual: str | None = None):
        super().__init__(
            message="Operation against a key holding the wrong kind of value.",
            extra_info={"operation": operation, "key": key, "expected": expected, "actual": actual},
        )
