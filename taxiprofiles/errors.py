# taxiprofiles/errors.py


class InvalidInput(ValueError):
    """
    Raised for malformed observations (bad hour, negative pickups, missing
    columns) or a cluster count outside the valid range.

    Always raised before any clustering work starts.
    """
