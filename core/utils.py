# core/utils.py

def sanitize(data: dict) -> dict:
    """
    Sanitize dictionary data before it is written:
    - Empty strings → None
    - Strip string whitespace
    - Enum members → their value
    - Everything else kept as-is
    """
    clean = {}

    for k, v in data.items():
        if isinstance(v, str):
            stripped = v.strip()
            clean[k] = stripped if stripped else None
            continue

        # str-based enums serialize to their value
        value = getattr(v, "value", None)
        if value is not None and isinstance(value, str):
            clean[k] = value
            continue

        clean[k] = v

    return clean
