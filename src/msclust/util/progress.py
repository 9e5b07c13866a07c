__all__ = ["ProgressFactoryProto", "TqdmProgressFactory"]

from typing import Iterable, Optional, Protocol, TypeVar

import tqdm

T = TypeVar("T")


class ProgressFactoryProto(Protocol):
    def __call__(
        self,
        iterable: Iterable[T],
        *,
        total: Optional[int] = None,
        desc: Optional[str] = None,
    ) -> Iterable[T]:
        ...


class TqdmProgressFactory:
    """Wraps iterables in tqdm bars sharing the given tqdm options."""

    def __init__(self, **tqdm_kwargs):
        self.tqdm_kwargs = tqdm_kwargs

    def __call__(
        self,
        iterable: Iterable[T],
        *,
        total: Optional[int] = None,
        desc: Optional[str] = None,
    ) -> Iterable[T]:
        return tqdm.tqdm(iterable, total=total, desc=desc, **self.tqdm_kwargs)
