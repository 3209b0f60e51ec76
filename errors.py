"""Error kinds raised by the county index and the federal API clients."""


class PartnerFinderError(Exception):
    """Base error. `status_code` is the HTTP status the API layer maps it to."""

    status_code = 500


class NotFoundError(PartnerFinderError):
    """Unknown ZIP, or a county with no derivable centroid."""

    status_code = 404


class InvalidInputError(PartnerFinderError):
    """Malformed NAICS code, unknown set-aside token, missing field."""

    status_code = 400


class UpstreamError(PartnerFinderError):
    """Reference file unreadable or a federal API returned a non-success response."""

    status_code = 502


class InternalError(PartnerFinderError):
    status_code = 500
