import enum
import typing


class ReadingStatus(str, enum.Enum):
    WANT_TO_READ = "WantToRead"
    CURRENTLY_READING = "CurrentlyReading"
    READ = "Read"


# Single source for both directions; rows only ever hold these labels.
_STORED_LABELS: typing.Dict[ReadingStatus, str] = {
    ReadingStatus.WANT_TO_READ: "Want to read",
    ReadingStatus.CURRENTLY_READING: "Currently reading",
    ReadingStatus.READ: "Read",
}

_STATUS_BY_LABEL: typing.Dict[str, ReadingStatus] = {
    label: status for status, label in _STORED_LABELS.items()
}

_STATUS_BY_NAME: typing.Dict[str, ReadingStatus] = {
    status.value.lower(): status for status in ReadingStatus
}

STORED_LABELS: typing.Tuple[str, ...] = tuple(_STORED_LABELS.values())


def to_stored(status: ReadingStatus) -> str:
    return _STORED_LABELS[status]


def from_stored(label: str) -> ReadingStatus:
    try:
        return _STATUS_BY_LABEL[label]
    except KeyError:
        raise ValueError("invalid_status")


def parse_status(value: typing.Union[str, ReadingStatus, None]) -> ReadingStatus:
    """Resolve an inbound status to a ReadingStatus.

    Accepts a member, its API name in any case (``wanttoread``) or the stored
    label (``Want to read``). Everything else raises ``ValueError("invalid_status")``.
    """
    if isinstance(value, ReadingStatus):
        return value
    if not isinstance(value, str):
        raise ValueError("invalid_status")

    candidate = value.strip()
    if candidate in _STATUS_BY_LABEL:
        return _STATUS_BY_LABEL[candidate]

    status = _STATUS_BY_NAME.get(candidate.lower())
    if status is None:
        raise ValueError("invalid_status")
    return status
