from rest_framework.exceptions import ValidationError


def int_query_param(request, name, default, minimum=0, maximum=200):
    """Parse a bounded integer query parameter, raising a 400 on bad input."""
    raw = request.query_params.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: "Must be an integer."})
    if value < minimum or value > maximum:
        raise ValidationError({name: f"Must be between {minimum} and {maximum}."})
    return value
