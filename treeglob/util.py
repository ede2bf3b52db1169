"""Shared helpers."""
import os
import typing

CASE_FS = os.path.normcase('A') != os.path.normcase('a')


def is_case_sensitive() -> bool:
    """Check if case sensitive."""

    return CASE_FS


def to_tuple(values: typing.Union[str, typing.Iterable[str]]) -> typing.Tuple[str, ...]:
    """Combine values."""

    return (values,) if isinstance(values, str) else tuple(values)


def norm_slash(path: str) -> str:
    """Normalize path separators to `/`."""

    return path.replace('\\', '/')


class Immutable(object):
    """Immutable."""

    __slots__: typing.Tuple[typing.Any, ...] = tuple()

    def __init__(self, **kwargs: typing.Any) -> None:
        """Initialize."""

        for k, v in kwargs.items():
            super(Immutable, self).__setattr__(k, v)

    def __setattr__(self, name: str, value: typing.Any) -> None:  # pragma: no cover
        """Prevent mutability."""

        raise AttributeError('Class is immutable!')
