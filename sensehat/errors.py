"""Exception types raised by the sensehat module and its drivers.

Nothing here is retried locally; every error propagates to the host, which
decides whether to try constructing the resource again.
"""

from __future__ import annotations

from typing import Optional, Sequence


class SenseHatError(Exception):
    """Base class for all module errors."""


class ConfigValidationError(SenseHatError):
    def __init__(self, path: str, field: str, reason: str = "is required"):
        self.path = path
        self.field = field
        self.reason = reason
        super().__init__(f'error validating "{path}": "{field}" {reason}')


class DependencyNotFoundError(SenseHatError):
    pass


class BoardNotLocalError(SenseHatError):
    pass


class I2CBusNotFoundError(SenseHatError):
    pass


class I2CError(SenseHatError):
    pass


class RegistrationError(SenseHatError):
    pass


class ResourceNotFoundError(SenseHatError):
    pass


class MustRebuildError(SenseHatError):
    """Raised by resources that can only be reconfigured by being rebuilt."""


class CombinedError(SenseHatError):
    """Several failures from one release sequence, reported together."""

    def __init__(self, errors: Sequence[BaseException]):
        self.errors = list(errors)
        super().__init__("; ".join(str(err) for err in self.errors))


def combine_errors(*errors: Optional[BaseException]) -> Optional[BaseException]:
    """Merge the non-None errors into one.

    Returns None when there are none, the error itself when there is exactly
    one, and a CombinedError otherwise. Nested CombinedErrors are flattened.
    """
    flat: list[BaseException] = []
    for err in errors:
        if err is None:
            continue
        if isinstance(err, CombinedError):
            flat.extend(err.errors)
        else:
            flat.append(err)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return CombinedError(flat)
