from marshmallow import ValidationError


def not_blank(value) -> None:
    if isinstance(value, str) and not value.strip():
        raise ValidationError("Field may not be blank.")


def strip_strings(data, *keys):
    """Return a copy of data with the given string fields stripped."""
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for key in keys:
        if isinstance(data.get(key), str):
            data[key] = data[key].strip()
    return data


def flatten_messages(messages) -> list:
    """Turn marshmallow's {field: [msg, ...]} into [{"field", "messages"}] for the error envelope."""
    if not isinstance(messages, dict):
        return [{"field": "_schema", "messages": messages if isinstance(messages, list) else [messages]}]
    errors = []
    for field, msgs in messages.items():
        if isinstance(msgs, dict):
            # nested/list fields: {index: [msg]}
            msgs = [f"{key}: {m}" for key, value in msgs.items() for m in (value if isinstance(value, list) else [value])]
        errors.append({"field": field, "messages": msgs if isinstance(msgs, list) else [msgs]})
    return errors
