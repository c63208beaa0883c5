"""Domain-specific errors for telldus-bridge."""


class TelldusBridgeError(Exception):
    """Base error for telldus-bridge."""


class ConfigurationError(TelldusBridgeError):
    """Raised when the configuration file is missing fields or malformed."""


class HubError(TelldusBridgeError):
    """Base hub API error."""


class HubConnectionError(HubError):
    """Raised when the hub cannot be reached."""


class HubResponseError(HubError):
    """Raised when the hub answers with an error status or error body."""


class EnumerationError(TelldusBridgeError):
    """Raised when listing accessories fails as a whole."""


class CharacteristicIOError(TelldusBridgeError):
    """Raised when a single characteristic read or write fails."""


class ReadOnlyCharacteristicError(TelldusBridgeError):
    """Raised when writing to a characteristic that has no write target."""


class AccessoryNotFoundError(TelldusBridgeError):
    """Raised when no accessory matches the requested id."""


class CharacteristicNotFoundError(TelldusBridgeError):
    """Raised when an accessory does not expose the requested characteristic."""


class ValueOutOfRangeError(TelldusBridgeError):
    """Raised when a written value falls outside the characteristic's range."""
