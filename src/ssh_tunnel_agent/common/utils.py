"""Validation helpers shared by the models and the parser."""

# Port range constants
MIN_PORT = 1
MAX_PORT = 65535


def validate_port(port: int, port_name: str = "Port") -> None:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Raises:
        ValueError: If port is not in valid range (1-65535)
    """
    if not isinstance(port, int) or isinstance(port, bool) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")


def parse_port(text: str, port_name: str = "Port") -> int:
    """Parse a port written as plain digits.

    Raises:
        ValueError: If the text is not all digits or out of range
    """
    if not text.isascii() or not text.isdigit():
        raise ValueError(f"{port_name} must be numeric, got '{text}'")
    port = int(text)
    validate_port(port, port_name)
    return port


def validate_hostname(value: str, field_name: str = "Host") -> str:
    """Validate a hostname token used inside a forward spec.

    Args:
        value: Hostname to validate
        field_name: Name of the field for error messages

    Returns:
        The hostname unchanged

    Raises:
        ValueError: If empty, or containing a colon or whitespace
    """
    if not value:
        raise ValueError(f"{field_name} cannot be empty")
    if ":" in value:
        raise ValueError(f"{field_name} cannot contain ':'")
    if any(char.isspace() for char in value):
        raise ValueError(f"{field_name} cannot contain whitespace")
    return value


def validate_non_empty_string(value: str, field_name: str) -> str:
    """Validate that a string is not empty or only whitespace.

    Returns:
        Stripped string value

    Raises:
        ValueError: If string is empty or only whitespace
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value.strip()
